"""Transport dialing and the session shutdown signal."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Awaitable, Callable

from ..constants import IRC_CONNECT_TIMEOUT

Transport = tuple[asyncio.StreamReader, asyncio.StreamWriter]
TransportFactory = Callable[[], Awaitable[Transport]]


def tcp_transport_factory(
    host: str, port: int, timeout: float = IRC_CONNECT_TIMEOUT
) -> TransportFactory:
    """Return a factory that opens a plain TCP stream to ``host:port``."""

    async def dial() -> Transport:
        return await asyncio.wait_for(
            asyncio.open_connection(host, port), timeout=timeout
        )

    return dial


class ShutdownSignal:
    """One-shot broadcast used to stop the sender loop.

    ``close`` is a test-and-set: it returns True for the single call that
    actually closed the signal and False for every later call. It may be
    called from any thread; waiters are woken on the loop that created the
    signal.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._closed = False
        self._event = asyncio.Event()
        try:
            self._loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            self._loop = None

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def close(self) -> bool:
        with self._lock:
            if self._closed:
                return False
            self._closed = True
        self._wake()
        return True

    def _wake(self) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            self._event.set()
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self._event.set()
        else:
            loop.call_soon_threadsafe(self._event.set)

    async def wait(self) -> None:
        await self._event.wait()
