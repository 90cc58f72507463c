"""
Domain Module: Processing loop and display.

Implements:
- Location mode filtering
- One-shot zero calibration
- Single-line location display, diagnostic records for RAW/MSG
"""

from .display import DisplayState, LocationDisplay
from .processing_loop import (
    LoopConfig,
    ProcessingLoop,
    ZeroReference,
    send_init_command,
)

__all__ = [
    'DisplayState',
    'LocationDisplay',
    'LoopConfig',
    'ProcessingLoop',
    'ZeroReference',
    'send_init_command',
]
