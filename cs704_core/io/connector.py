"""
Stream connectors.

Connector wraps a pyserial port: it hands out one line at a time and sends
the optional init command. ReplayConnector offers the same interface over a
recorded capture file for offline runs.

Transport failures raise ConnectorError and are never retried here.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol, Union

import serial

logger = logging.getLogger(__name__)


class ConnectorError(IOError):
    """Fatal transport failure (open, read or write)."""


class SerialLike(Protocol):
    """The subset of serial.Serial used by Connector."""

    def readline(self) -> bytes: ...

    def write(self, data: bytes) -> Optional[int]: ...

    def close(self) -> None: ...


def _strip_line(raw: bytes) -> str:
    # Invalid UTF-8 from line noise must not become a transport error
    return raw.decode("utf-8", errors="replace").rstrip("\r\n")


class Connector:
    """Line-oriented connection to the device over a serial port."""

    def __init__(self, port: SerialLike, name: str = "serial"):
        """
        Args:
            port: Open serial port (serial.Serial or a compatible object)
            name: Port name, for log messages
        """
        self._port = port
        self.name = name

    @classmethod
    def open(cls, address: str, baud: int) -> 'Connector':
        """
        Open the serial device.

        Args:
            address: Serial port path (e.g. "/dev/serial0")
            baud: Baud rate

        Raises:
            ConnectorError: If the port cannot be opened or configured
        """
        logger.debug(f"Opening serial port ({address}, {baud} baud)")
        try:
            # timeout=None: readline blocks until a full line arrives
            port = serial.Serial(address, baud, timeout=None)
        except (serial.SerialException, ValueError, OSError) as e:
            raise ConnectorError(f"Could not open {address}: {e}") from e
        logger.debug("Connected to serial port")
        return cls(port, name=address)

    def read_line(self) -> Optional[str]:
        """
        Block until one full line is available.

        Returns:
            The line without its line terminator, or None at end of input

        Raises:
            ConnectorError: On transport failure
        """
        try:
            raw = self._port.readline()
        except (serial.SerialException, OSError) as e:
            raise ConnectorError(f"Read from {self.name} failed: {e}") from e

        if not raw:
            return None

        line = _strip_line(raw)
        logger.debug(f"read line: {line}")
        return line

    def write(self, data: str):
        """
        Send a string to the device verbatim.

        Raises:
            ConnectorError: On transport failure
        """
        try:
            self._port.write(data.encode("utf-8"))
        except (serial.SerialException, OSError) as e:
            raise ConnectorError(f"Write to {self.name} failed: {e}") from e

    def close(self):
        """Close the underlying port."""
        self._port.close()

    def __enter__(self) -> 'Connector':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class ReplayConnector:
    """
    Replays a recorded capture file line by line.

    Writes are logged and discarded since there is no device to receive them.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.name = str(self.path)
        try:
            self._file = self.path.open("rb")
        except OSError as e:
            raise ConnectorError(f"Could not open {self.path}: {e}") from e

    def read_line(self) -> Optional[str]:
        """Next recorded line, or None at end of file."""
        try:
            raw = self._file.readline()
        except OSError as e:
            raise ConnectorError(f"Read from {self.path} failed: {e}") from e

        if not raw:
            return None
        return _strip_line(raw)

    def write(self, data: str):
        logger.debug(f"Replay mode, not sending: {data!r}")

    def close(self):
        self._file.close()

    def __enter__(self) -> 'ReplayConnector':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
