"""
I/O Module: Serial transport and line decoding.

- Connector / ReplayConnector: one line at a time from the device or a capture
- decode: one line to a typed message, None for anything unrecognized
"""

from .connector import Connector, ConnectorError, ReplayConnector, SerialLike
from .line_decoder import decode, decode_record, encode

__all__ = [
    'Connector',
    'ConnectorError',
    'ReplayConnector',
    'SerialLike',
    'decode',
    'decode_record',
    'encode',
]
