"""Outbound loop draining the send queue under a token bucket."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ..constants import (
    IRC_LINE_DELIMITER,
    IRC_RATE_LIMIT_MESSAGES,
    IRC_RATE_LIMIT_WINDOW,
)
from ..errors import WriteError, log_error
from ..logs.logger import logger
from .connection import ShutdownSignal

if TYPE_CHECKING:  # pragma: no cover
    from .client import TwitchChatClient


class TokenBucket:
    """Token bucket holding ``capacity`` tokens, refilled fully every ``window`` seconds.

    A deficit is turned into a delay rather than a rejection: callers ask
    :meth:`required_delay`, sleep for it, send, then :meth:`consume`.
    """

    def __init__(
        self,
        capacity: float = IRC_RATE_LIMIT_MESSAGES,
        window: float = IRC_RATE_LIMIT_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1 or window <= 0:
            raise ValueError("capacity must be >= 1 and window > 0")
        self.capacity = float(capacity)
        self.window = float(window)
        self._clock = clock
        self.tokens = self.capacity
        self.last_refill = clock()

    @property
    def rate(self) -> float:
        """Tokens added per second."""
        return self.capacity / self.window

    def refill(self) -> float:
        now = self._clock()
        elapsed = max(0.0, now - self.last_refill)
        self.last_refill = now
        self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
        return self.tokens

    def required_delay(self) -> float:
        """Refill, then return how long to wait before the next send (0 if none)."""
        tokens = self.refill()
        if tokens < 1:
            return 1 - tokens
        return 0.0

    def consume(self) -> None:
        self.tokens -= 1


class RateLimitedSender:
    """Background task writing queued lines until shutdown or a write failure."""

    def __init__(
        self,
        client: TwitchChatClient,
        queue: asyncio.Queue[str],
        shutdown: ShutdownSignal,
        bucket: TokenBucket,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.queue = queue
        self.shutdown = shutdown
        self.bucket = bucket
        self._sleep = sleep

    async def run(self) -> None:
        logger.log_event(
            "irc",
            "sender_start",
            level=logging.DEBUG,
            user=self.client.nick,
            capacity=self.bucket.capacity,
            window=self.bucket.window,
        )
        shutdown_wait = asyncio.ensure_future(self.shutdown.wait())
        next_line: asyncio.Future[str] | None = None
        try:
            while True:
                next_line = asyncio.ensure_future(self.queue.get())
                done, _ = await asyncio.wait(
                    {shutdown_wait, next_line}, return_when=asyncio.FIRST_COMPLETED
                )
                # Shutdown wins when both are ready
                if shutdown_wait in done:
                    return
                line = next_line.result()
                next_line = None
                if not await self._send(line):
                    return
        finally:
            shutdown_wait.cancel()
            if next_line is not None:
                next_line.cancel()
            await self.client.close_transport()
            logger.log_event(
                "irc", "sender_stopped", level=logging.DEBUG, user=self.client.nick
            )

    async def _send(self, line: str) -> bool:
        if not line.endswith(IRC_LINE_DELIMITER):
            line = line + IRC_LINE_DELIMITER

        delay = self.bucket.required_delay()
        if delay > 0:
            logger.log_event(
                "irc",
                "rate_limit_wait",
                level=logging.DEBUG,
                user=self.client.nick,
                delay=round(delay, 3),
            )
            await self._sleep(delay)

        try:
            await self.client.write(line)
        except WriteError as e:
            log_error("Sending to server failed", e, context={"user": self.client.nick})
            self.client.disconnect()
            return False

        self.bucket.consume()
        return True
