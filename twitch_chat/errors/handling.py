from __future__ import annotations

import asyncio

from ..logging_config import log_structured_error
from .internal import (
    AlreadyConnectedError,
    DialError,
    HandshakeError,
    InternalError,
    ReadError,
    WriteError,
)


def categorize_error(error: BaseException) -> str:
    """Map an exception to the category used for error aggregation."""
    if isinstance(error, HandshakeError):
        return "handshake"
    if isinstance(
        error, DialError | ReadError | WriteError | OSError | asyncio.TimeoutError
    ):
        return "network"
    if isinstance(error, AlreadyConnectedError):
        return "state"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(message: str, error: BaseException, context: dict | None = None) -> None:
    """Logs an error message with the associated exception details.

    The exception is categorized (network, handshake, state, internal or
    unknown) so repeated failures of one kind show up together in the error
    summary.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    merged: dict = {}
    if isinstance(error, InternalError):
        merged.update(error.data)
    if context:
        merged.update(context)
    log_structured_error(
        error_type=categorize_error(error),
        message=f"{message}: {str(error)}",
        exception=error,
        context=merged or None,
    )
