"""
Processing loop for decoded telemetry.

Reads one line, decodes it and dispatches it before reading the next, so
messages are handled strictly in arrival order. The only state carried
between lines is the zero reference used for re-zeroing Location fixes.

Location handling order:
1. Mode filter (optional): drop fixes whose mode differs from the filter
2. Zero calibration (optional): latch the first surviving fix as origin
3. Display the (possibly offset) coordinates
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from cs704_core.io import decode
from cs704_core.metrics import get_metrics
from cs704_core.proto import DebugMessage, Location, Message, Raw
from .display import DisplayState, LocationDisplay, log_debug_message, log_raw_sample

logger = logging.getLogger(__name__)


@dataclass
class LoopConfig:
    """
    Startup options for the processing loop.

    Attributes:
        mode_filter: Only Location fixes with exactly this mode are shown
        rezero: Use the first shown fix as the origin for all later fixes
    """

    mode_filter: Optional[str] = None
    rezero: bool = False


@dataclass(frozen=True)
class ZeroReference:
    """Origin subtracted from Location coordinates once latched."""

    x: float
    y: float

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        """Offset a fix by this origin using float32 arithmetic."""
        return (
            float(np.float32(x) - np.float32(self.x)),
            float(np.float32(y) - np.float32(self.y)),
        )


class ProcessingLoop:
    """
    Dispatches decoded messages to the display.

    Usage:
        loop = ProcessingLoop(LoopConfig(mode_filter="IMU", rezero=True))
        loop.run(connector)
    """

    def __init__(self, config: Optional[LoopConfig] = None,
                 display: Optional[LocationDisplay] = None):
        self.config = config if config is not None else LoopConfig()
        self.display = display if display is not None else LocationDisplay()
        self.running = False
        self._zero_reference: Optional[ZeroReference] = None

    @property
    def zero_reference(self) -> Optional[ZeroReference]:
        return self._zero_reference

    @property
    def zeroed(self) -> bool:
        return self._zero_reference is not None

    def handle(self, message: Message) -> Optional[DisplayState]:
        """
        Handle one decoded message.

        Args:
            message: Location, Raw or DebugMessage

        Returns:
            The new display state for a shown Location, None otherwise
        """
        if isinstance(message, Location):
            return self._handle_location(message)

        if isinstance(message, Raw):
            get_metrics().increment('raw_samples')
            log_raw_sample(message)
        elif isinstance(message, DebugMessage):
            get_metrics().increment('debug_messages')
            log_debug_message(message)
        else:
            raise TypeError(f"Not a telemetry message: {type(message).__name__}")
        return None

    def _handle_location(self, loc: Location) -> Optional[DisplayState]:
        mode_filter = self.config.mode_filter
        if mode_filter is not None and mode_filter != loc.mode:
            get_metrics().increment_drop('mode_filtered')
            return None

        if self.config.rezero and self._zero_reference is None:
            logger.info(f"Applying new zero position X: {loc.x:.2f}, Y: {loc.y:.2f}")
            self._zero_reference = ZeroReference(loc.x, loc.y)

        if self._zero_reference is not None:
            x, y = self._zero_reference.apply(loc.x, loc.y)
        else:
            x, y = loc.x, loc.y

        state = DisplayState(x=x, y=y, mode=loc.mode)
        self.display.show(state)
        get_metrics().increment('locations_displayed')
        return state

    def step(self, connector) -> bool:
        """
        Read, decode and handle one line.

        Returns:
            False at end of input, True otherwise

        Raises:
            ConnectorError: On transport failure
        """
        line = connector.read_line()
        if line is None:
            return False

        get_metrics().increment('lines_in')
        message = decode(line)
        if message is not None:
            self.handle(message)
        return True

    def run(self, connector):
        """
        Process lines until end of input or stop().

        Raises:
            ConnectorError: On transport failure
        """
        self.running = True
        try:
            while self.running:
                if not self.step(connector):
                    logger.info("End of input")
                    break
        finally:
            self.running = False
            self.display.finish()

    def stop(self):
        """Stop after the line currently being handled."""
        self.running = False


def send_init_command(connector, command: Optional[str]) -> bool:
    """
    Send the one-shot init command, if one is configured.

    Returns:
        True if a command was sent

    Raises:
        ConnectorError: On transport failure
    """
    if not command:
        return False
    logger.debug(f"Sending command: {command}")
    connector.write(command)
    return True
