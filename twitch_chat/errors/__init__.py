"""Error types and error logging helpers."""

from .handling import log_error  # noqa: F401
from .internal import (  # noqa: F401
    AlreadyConnectedError,
    ChatClientError,
    ConfigError,
    DialError,
    HandshakeError,
    InternalError,
    ReadError,
    WriteError,
)

__all__ = [
    "AlreadyConnectedError",
    "ChatClientError",
    "ConfigError",
    "DialError",
    "HandshakeError",
    "InternalError",
    "ReadError",
    "WriteError",
    "log_error",
]
