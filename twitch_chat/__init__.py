"""Asyncio client for Twitch chat over IRC."""

from .config import ClientOptions  # noqa: F401
from .errors import (  # noqa: F401
    AlreadyConnectedError,
    ChatClientError,
    DialError,
    HandshakeError,
    ReadError,
    WriteError,
)
from .irc import EventKind, TwitchChatClient  # noqa: F401

__version__ = "1.0.0"

__all__ = [
    "AlreadyConnectedError",
    "ChatClientError",
    "ClientOptions",
    "DialError",
    "EventKind",
    "HandshakeError",
    "ReadError",
    "TwitchChatClient",
    "WriteError",
]
