"""
Telemetry Message Schemas.

Defines the three record kinds emitted by the positioning device, one JSON
object per line, discriminated by the "type" field:

    {"type":"LOC", "x":..., "y":..., "h":..., "mode":"...", "update_rate":...}
    {"type":"RAW", "accel_x":..., ..., "mag_z":..., "sampling_rate":...}
    {"type":"MSG", "body":"...", "data":{"key":"value", ...}}

Physical quantities are single precision on the device, so decoded values
are rounded to float32. Validation failures raise ValueError.
"""

import json
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Union

import numpy as np


UINT_MAX = int(np.iinfo(np.uint64).max)


class MessageType(str, Enum):
    """Wire discriminator values."""

    LOCATION = "LOC"
    RAW = "RAW"
    DEBUG = "MSG"


class UnknownMessageType(ValueError):
    """Raised for a record whose discriminator names no known variant."""

    def __init__(self, tag: Any):
        super().__init__(f"Unknown message type: {tag!r}")
        self.tag = tag


def to_f32(value: float) -> float:
    """Round a float to single precision, returned as a Python float."""
    return float(np.float32(value))


def _require(data: Dict[str, Any], name: str) -> Any:
    if name not in data:
        raise ValueError(f"Missing field: {name}")
    return data[name]


def _f32_field(data: Dict[str, Any], name: str) -> float:
    value = _require(data, name)
    # bool is an int subclass but never a valid number on the wire
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field {name} must be a number, got {type(value).__name__}")
    try:
        with np.errstate(over="ignore"):
            rounded = np.float32(value)
    except OverflowError:
        rounded = np.float32(np.inf)
    # Literals just above the f32 max still round to it; only overflow is rejected
    if not np.isfinite(rounded):
        raise ValueError(f"Field {name} out of float32 range: {value}")
    return float(rounded)


def _optional_f32_field(data: Dict[str, Any], name: str) -> Optional[float]:
    if data.get(name) is None:
        return None
    return _f32_field(data, name)


def _uint_field(data: Dict[str, Any], name: str) -> int:
    value = _require(data, name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Field {name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > UINT_MAX:
        raise ValueError(f"Field {name} out of unsigned range: {value}")
    return value


def _str_field(data: Dict[str, Any], name: str) -> str:
    value = _require(data, name)
    if not isinstance(value, str):
        raise ValueError(f"Field {name} must be a string, got {type(value).__name__}")
    return value


@dataclass
class Location:
    """
    Position fix reported by the device.

    Attributes:
        x: X coordinate
        y: Y coordinate
        h: Heading/elevation, if the device reports one
        mode: Source classification of the fix (e.g. "IMU", "UWB"), free-form
        update_rate: Fix update rate (Hz)
    """

    TYPE_TAG: ClassVar[MessageType] = MessageType.LOCATION

    x: float
    y: float
    h: Optional[float]
    mode: str
    update_rate: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Location':
        """Build a Location from a decoded JSON object (tag not checked)."""
        return cls(
            x=_f32_field(data, "x"),
            y=_f32_field(data, "y"),
            h=_optional_f32_field(data, "h"),
            mode=_str_field(data, "mode"),
            update_rate=_uint_field(data, "update_rate"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire form including the discriminator. An absent h is omitted."""
        record = {"type": self.TYPE_TAG.value, "x": self.x, "y": self.y}
        if self.h is not None:
            record["h"] = self.h
        record["mode"] = self.mode
        record["update_rate"] = self.update_rate
        return record

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class Raw:
    """
    Raw 9-axis IMU sample.

    All nine axes are mandatory; sampling_rate is in Hz.
    """

    TYPE_TAG: ClassVar[MessageType] = MessageType.RAW

    accel_x: float
    accel_y: float
    accel_z: float

    gyro_x: float
    gyro_y: float
    gyro_z: float

    mag_x: float
    mag_y: float
    mag_z: float

    sampling_rate: int

    AXIS_FIELDS: ClassVar[tuple] = (
        "accel_x", "accel_y", "accel_z",
        "gyro_x", "gyro_y", "gyro_z",
        "mag_x", "mag_y", "mag_z",
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Raw':
        """Build a Raw sample from a decoded JSON object (tag not checked)."""
        axes = {name: _f32_field(data, name) for name in cls.AXIS_FIELDS}
        return cls(sampling_rate=_uint_field(data, "sampling_rate"), **axes)

    @property
    def accel(self) -> tuple:
        return (self.accel_x, self.accel_y, self.accel_z)

    @property
    def gyro(self) -> tuple:
        return (self.gyro_x, self.gyro_y, self.gyro_z)

    @property
    def mag(self) -> tuple:
        return (self.mag_x, self.mag_y, self.mag_z)

    def to_dict(self) -> Dict[str, Any]:
        record = {"type": self.TYPE_TAG.value}
        record.update(asdict(self))
        return record

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class DebugMessage:
    """
    Free-text diagnostic from the device firmware.

    Attributes:
        body: Message text
        data: String attributes attached to the message (unordered)
    """

    TYPE_TAG: ClassVar[MessageType] = MessageType.DEBUG

    body: str
    data: Dict[str, str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DebugMessage':
        """Build a DebugMessage from a decoded JSON object (tag not checked)."""
        body = _str_field(data, "body")
        attributes = _require(data, "data")
        if not isinstance(attributes, dict):
            raise ValueError(f"Field data must be an object, got {type(attributes).__name__}")
        for key, value in attributes.items():
            if not isinstance(value, str):
                raise ValueError(f"Attribute {key!r} must be a string, got {type(value).__name__}")
        return cls(body=body, data=dict(attributes))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.TYPE_TAG.value, "body": self.body, "data": dict(self.data)}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


Message = Union[Location, Raw, DebugMessage]

MESSAGE_CLASSES = {
    MessageType.LOCATION.value: Location,
    MessageType.RAW.value: Raw,
    MessageType.DEBUG.value: DebugMessage,
}


def message_from_dict(data: Dict[str, Any]) -> Message:
    """
    Select the variant by the "type" discriminator and build it.

    Args:
        data: Decoded JSON object

    Returns:
        Location, Raw or DebugMessage

    Raises:
        ValueError: If the discriminator is missing or unknown, or a field
            is missing or has the wrong type
    """
    if not isinstance(data, dict):
        raise ValueError(f"Record must be an object, got {type(data).__name__}")

    tag = data.get("type")
    if tag is None:
        raise ValueError("Missing discriminator field: type")

    message_cls = MESSAGE_CLASSES.get(tag) if isinstance(tag, str) else None
    if message_cls is None:
        raise UnknownMessageType(tag)

    return message_cls.from_dict(data)
