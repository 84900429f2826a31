"""
ros2topics Codec - Convert between JSON literals and message instances.
"""

import json
from typing import Any

from ros2topics.middleware.registry import MessageType


class MessageCodecError(ValueError):
    """A JSON literal could not be turned into a message."""


def decode_message(msg_type: MessageType, literal: str) -> Any:
    """
    Build a message from a JSON object literal.

    Raises:
        MessageCodecError: If the literal isn't a JSON object or doesn't fit the type
    """
    try:
        values = json.loads(literal)
    except json.JSONDecodeError as e:
        raise MessageCodecError(f"{e.msg} at column {e.colno}") from e

    if not isinstance(values, dict):
        raise MessageCodecError("expected a JSON object")

    try:
        return msg_type.create(values)
    except (AttributeError, TypeError, ValueError) as e:
        raise MessageCodecError(str(e)) from e


def encode_message(msg_type: MessageType, message: Any) -> str:
    """Render a message as a compact JSON string."""
    return json.dumps(msg_type.to_dict(message), default=str)
