"""
Protocol Module: Telemetry message schemas.

One JSON record per line, discriminated by the "type" field:
- LOC: Location fix
- RAW: Raw 9-axis IMU sample
- MSG: Debug message with string attributes
"""

from .messages import (
    Message,
    MessageType,
    Location,
    Raw,
    DebugMessage,
    UnknownMessageType,
    message_from_dict,
    to_f32,
)

__all__ = [
    'Message',
    'MessageType',
    'Location',
    'Raw',
    'DebugMessage',
    'UnknownMessageType',
    'message_from_dict',
    'to_f32',
]
