"""
Terminal output for the processing loop.

Locations are drawn on a single line that is overwritten in place with a
carriage return; debug messages and raw samples go to the log as records.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from cs704_core.proto import DebugMessage, Raw

logger = logging.getLogger(__name__)


@dataclass
class DisplayState:
    """Coordinates and mode currently on screen."""

    x: float
    y: float
    mode: str

    def format_line(self) -> str:
        return f"\r X: {self.x:.2f} Y: {self.y:.2f} Mode: {self.mode}"


class LocationDisplay:
    """Single overwritten status line on a text stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.current: Optional[DisplayState] = None

    def show(self, state: DisplayState):
        self.current = state
        self.stream.write(state.format_line())
        self.stream.flush()

    def finish(self):
        """Move past the status line so later output starts on a fresh line."""
        if self.current is not None:
            self.stream.write("\n")
            self.stream.flush()


def log_debug_message(message: DebugMessage):
    logger.info(f"Debug: {message.body}, ({message.data})")


def log_raw_sample(raw: Raw):
    logger.info(
        f"Raw: accel={raw.accel} gyro={raw.gyro} mag={raw.mag} "
        f"sampling_rate={raw.sampling_rate}"
    )
