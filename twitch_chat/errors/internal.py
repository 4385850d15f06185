"""Centralized error hierarchy for the chat client.

These exceptions give semantic categories to the failures a chat session can
end with. Raw socket / asyncio errors never escape the client directly; they
are wrapped in one of these with the original kept as ``__cause__``.

Classes:
  InternalError          – Base for all internal errors.
  ChatClientError        – Base for every error raised by the chat client.
  AlreadyConnectedError  – connect() called while a session is live.
  DialError              – The transport could not be opened.
  HandshakeError         – The server did not welcome the credentials.
  ReadError              – Receive failure or inactivity timeout.
  WriteError             – Send failure or write timeout.
  ConfigError            – Configuration file could not be loaded.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class ChatClientError(InternalError):
    """Base class for errors raised by the chat client."""


class AlreadyConnectedError(ChatClientError):
    """Raised when connect() is called while a session is already live.

    The existing session is left untouched.
    """

    def __init__(self, message: str = "Already connected") -> None:
        super().__init__(message)


class DialError(ChatClientError):
    """Raised when the transport factory fails to open a connection."""


class HandshakeError(ChatClientError):
    """Raised when the first server reply is not the welcome numeric.

    Attributes:
        line: The raw line the server answered with.
    """

    def __init__(self, line: str) -> None:
        super().__init__(
            f"Unexpected server response: {line.rstrip()}", data={"line": line}
        )
        self.line = line


class ReadError(ChatClientError):
    """Raised when reading from the server fails or times out.

    This is how a blocking connect() ends.
    """


class WriteError(ChatClientError):
    """Raised when writing to the server fails or times out."""


class ConfigError(InternalError):
    """Raised when a configuration file is unreadable or invalid."""


__all__ = [
    "InternalError",
    "ChatClientError",
    "AlreadyConnectedError",
    "DialError",
    "HandshakeError",
    "ReadError",
    "WriteError",
    "ConfigError",
]
