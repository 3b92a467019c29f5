"""
Protocol definitions for the WebSocket broadcast chat.

This module defines the message structures and data formats used in communication
between client and server components.

Server to client frames are JSON objects of the form ``{"type": ..., "data": ...}``.
Client to server frames are plain text with no envelope.
"""

import json
import re
import time
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Dict, Any, List, Iterable

from common.constants import MessageTypes


class DecodeError(ValueError):
    """Raised when a server frame cannot be decoded into a known event."""


# An ampersand that does not already start one of the entity references we emit
_BARE_AMPERSAND = re.compile(r'&(?!(?:amp|lt|gt|quot|#[0-9]+|#[xX][0-9a-fA-F]+);)')


def sanitize(text: Any) -> str:
    """
    Escape HTML-unsafe characters (&, <, >, ") in user supplied text.

    Entity references produced by a previous pass are left alone, so
    ``sanitize(sanitize(x)) == sanitize(x)``.
    """
    value = _BARE_AMPERSAND.sub('&amp;', str(text))
    return value.replace('<', '&lt;').replace('>', '&gt;').replace('"', '&quot;')


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ChatMessage:
    """Chat message structure."""
    time: int
    text: str
    author: str
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChatMessage':
        try:
            message = cls(
                time=int(data['time']),
                text=str(data['text']),
                author=str(data['author']),
                color=str(data['color'])
            )
            # Timestamp must be a representable local instant
            datetime.fromtimestamp(message.time / 1000)
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as e:
            raise DecodeError(f"Invalid chat message payload: {data!r}") from e
        return message


def create_color_message(color: str) -> Dict[str, Any]:
    """Create a color assignment message."""
    return {
        "type": MessageTypes.COLOR,
        "data": color
    }


def create_history_message(messages: Iterable[ChatMessage]) -> Dict[str, Any]:
    """Create a history replay message."""
    return {
        "type": MessageTypes.HISTORY,
        "data": [message.to_dict() for message in messages]
    }


def create_chat_message(message: ChatMessage) -> Dict[str, Any]:
    """Create a broadcast chat message."""
    return {
        "type": MessageTypes.MESSAGE,
        "data": message.to_dict()
    }


def create_error_message(text: str) -> Dict[str, Any]:
    """Create an error message."""
    return {
        "type": MessageTypes.ERROR,
        "data": text
    }


def encode_frame(message: Dict[str, Any]) -> str:
    """Serialize an outbound event to a text frame."""
    return json.dumps(message)


def parse_server_frame(raw: Any) -> Dict[str, Any]:
    """
    Parse a frame received from the server.

    Returns the decoded ``{"type", "data"}`` event. For ``history`` and
    ``message`` events the payload is converted into ChatMessage objects.
    Raises DecodeError for anything that is not a well formed event.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise DecodeError("Frame is not valid UTF-8") from e

    try:
        event = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise DecodeError(f"Invalid JSON: {raw!r}") from e

    if not isinstance(event, dict) or 'type' not in event:
        raise DecodeError(f"Frame has no type: {raw!r}")

    msg_type = event['type']
    data = event.get('data')

    if msg_type == MessageTypes.HISTORY:
        if not isinstance(data, list):
            raise DecodeError("History payload must be a list")
        messages: List[ChatMessage] = [ChatMessage.from_dict(item) for item in data]
        return {"type": msg_type, "data": messages}

    if msg_type == MessageTypes.MESSAGE:
        if not isinstance(data, dict):
            raise DecodeError("Message payload must be an object")
        return {"type": msg_type, "data": ChatMessage.from_dict(data)}

    return {"type": msg_type, "data": data}
