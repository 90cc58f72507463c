"""
Line decoder for the telemetry stream.

The serial link is noisy: partial writes, truncated frames and firmware
printf output all show up as lines that are not valid records. decode()
therefore never raises on bad content; it returns None and the caller moves
on to the next line.
"""

import json
import logging
from typing import Any, Dict, Optional

from cs704_core.metrics import get_metrics
from cs704_core.proto.messages import Message, UnknownMessageType, message_from_dict

logger = logging.getLogger(__name__)


def _reject_constant(token: str):
    # json accepts NaN/Infinity by default, the device never sends them
    raise ValueError(f"Non-standard JSON constant: {token}")


def _reject_duplicate_keys(pairs):
    # A repeated key (including a nested "data" attribute) means a corrupted frame
    record = {}
    for key, value in pairs:
        if key in record:
            raise ValueError(f"Duplicate key: {key!r}")
        record[key] = value
    return record


def decode_record(record: Dict[str, Any]) -> Optional[Message]:
    """
    Decode an already parsed JSON object.

    Args:
        record: JSON object from one line

    Returns:
        Typed message, or None if the record is not a recognized message
    """
    metrics = get_metrics()
    try:
        message = message_from_dict(record)
    except UnknownMessageType as e:
        logger.debug(f"Skipping record: {e}")
        metrics.increment_drop('unknown_type')
        return None
    except (ValueError, TypeError) as e:
        logger.debug(f"Skipping record: {e}")
        metrics.increment_drop('invalid_fields')
        return None

    metrics.increment('messages_decoded')
    return message


def decode(line: str) -> Optional[Message]:
    """
    Decode one line of the telemetry stream.

    Args:
        line: One line of text, newline already stripped

    Returns:
        Typed message, or None if the line is not a recognized message
    """
    try:
        record = json.loads(
            line,
            parse_constant=_reject_constant,
            object_pairs_hook=_reject_duplicate_keys,
        )
    except (ValueError, RecursionError) as e:
        logger.debug(f"Error decoding line: {e}")
        logger.debug(line)
        get_metrics().increment_drop('parse_error')
        return None

    return decode_record(record)


def encode(message: Message) -> str:
    """Encode a message as one wire line (without the trailing newline)."""
    return message.to_json()
