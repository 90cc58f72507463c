"""
Pytest configuration and shared fixtures for CS704 UI tests.

This module provides reusable fixtures for testing message decoding, the
serial connector and the processing loop.
"""

import io
import sys
import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from cs704_core.metrics import reset_metrics
from cs704_core.domain import LocationDisplay


# =============================================================================
# Fake Transport
# =============================================================================


class FakeSerial:
    """
    In-memory stand-in for serial.Serial.

    readline() hands out the queued chunks in order and b'' once exhausted.
    An exception instance in the queue is raised instead of returned.
    """

    def __init__(self, chunks: Optional[List] = None):
        self.chunks = list(chunks or [])
        self.written: List[bytes] = []
        self.closed = False
        self.write_error: Optional[Exception] = None

    def readline(self) -> bytes:
        if not self.chunks:
            return b''
        chunk = self.chunks.pop(0)
        if isinstance(chunk, Exception):
            raise chunk
        return chunk

    def write(self, data: bytes) -> int:
        if self.write_error is not None:
            raise self.write_error
        self.written.append(data)
        return len(data)

    def close(self):
        self.closed = True


class LineSource:
    """Connector stand-in that yields pre-split text lines."""

    def __init__(self, lines: List[str]):
        self.lines = list(lines)
        self.written: List[str] = []

    def read_line(self) -> Optional[str]:
        if not self.lines:
            return None
        return self.lines.pop(0)

    def write(self, data: str):
        self.written.append(data)

    def close(self):
        pass


# =============================================================================
# Wire Record Helpers
# =============================================================================


def location_line(x: float, y: float, mode: str = "IMU", h: Optional[float] = 1.57,
                  update_rate: int = 100) -> str:
    """Build a LOC wire line."""
    record = {"type": "LOC", "x": x, "y": y, "mode": mode, "update_rate": update_rate}
    if h is not None:
        record["h"] = h
    return json.dumps(record)


def raw_record() -> Dict:
    """A complete RAW record as a dict."""
    return {
        "type": "RAW",
        "accel_x": 11.22, "accel_y": 33.44, "accel_z": 55.66,
        "gyro_x": 1.5, "gyro_y": -2.25, "gyro_z": 0.125,
        "mag_x": 20.0, "mag_y": -40.0, "mag_z": 60.0,
        "sampling_rate": 100,
    }


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_metrics():
    """Every test starts with zeroed global counters."""
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def fake_serial() -> FakeSerial:
    return FakeSerial()


@pytest.fixture
def display_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def display(display_stream) -> LocationDisplay:
    """LocationDisplay writing to an in-memory stream."""
    return LocationDisplay(stream=display_stream)


@pytest.fixture
def sample_lines() -> Dict[str, str]:
    """One well-formed wire line per message type."""
    return {
        "LOC": '{ "type": "LOC", "x": 11.22, "y": 33.44, "h":1.57, "mode": "IMU", "update_rate": 100 }',
        "RAW": json.dumps(raw_record()),
        "MSG": '{"type":"MSG","body":"anchor lost","data":{"anchor":"A2","rssi":"-91"}}',
    }
