"""Twitch chat client: connection lifecycle and the public API."""

from __future__ import annotations

import asyncio
import logging
import re
import threading
import time
from collections.abc import Awaitable, Callable

from ..config.model import ClientOptions
from ..constants import (
    IRC_CAPABILITIES,
    IRC_CAPABILITY_NAMESPACE,
    IRC_LINE_DELIMITER,
    IRC_WELCOME_NUMERIC,
    IRC_WHISPER_CHANNEL,
)
from ..errors import (
    AlreadyConnectedError,
    DialError,
    HandshakeError,
    WriteError,
    log_error,
)
from ..logs.logger import logger
from .connection import ShutdownSignal, TransportFactory, tcp_transport_factory
from .dispatcher import IRCDispatcher
from .parser import format_channel, parse_message
from .receiver import IRCReceiver
from .registry import CallbackRegistry, EventKind, Listener
from .sender import RateLimitedSender, TokenBucket

SENDER_STOP_TIMEOUT = 2.0

_PASS_RE = re.compile(r"PASS \S+")


def _on_loop(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


class TwitchChatClient:  # pylint: disable=too-many-instance-attributes
    """Client for one Twitch chat session.

    ``connect`` performs the handshake, starts the rate limited sender as a
    background task and then runs the receive loop in the calling task, so it
    only finishes when the session ends. ``say``, ``join`` and friends may be
    called from listeners, other tasks or other threads; they never block and
    silently do nothing while disconnected.

    Listeners are registered with the ``on_*`` methods, which also work as
    decorators. They are called in order from the receive loop; a slow
    listener delays every later message.
    """

    def __init__(
        self,
        options: ClientOptions | None = None,
        transport_factory: TransportFactory | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self.options = options or ClientOptions()
        self._transport_factory = transport_factory or tcp_transport_factory(
            self.options.host, self.options.port, self.options.connect_timeout
        )
        self._clock = clock
        self._sleep = sleep
        self.registry = CallbackRegistry()
        self.dispatcher = IRCDispatcher(self, self.registry)
        self.nick: str | None = None
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        self.send_queue: asyncio.Queue[str] = asyncio.Queue(
            maxsize=self.options.send_queue_size
        )
        self.shutdown_signal: ShutdownSignal | None = None
        self._state_lock = threading.Lock()
        self._connect_lock = asyncio.Lock()
        self._connected = False
        self._sender_task: asyncio.Task[None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    async def connect(self, nick: str, password: str) -> None:
        """Connect, authenticate and process events until the session ends.

        Raises:
            AlreadyConnectedError: A session is already live.
            DialError: The transport could not be opened.
            HandshakeError: The server rejected the credentials.
            ReadError: The session ended (connection lost, read timeout or
                ``disconnect``). This is the normal way this call returns.
        """
        reader = await self._open(nick)
        receiver = IRCReceiver(self, reader, self.dispatcher, self.options.read_timeout)
        try:
            await self._authenticate(nick, password, receiver)
        except BaseException:
            # Also covers cancellation while waiting for the welcome line
            self.disconnect()
            await self.close_transport()
            raise

        for channel in self.options.channels:
            self.join(channel)

        bucket = TokenBucket(
            self.options.rate_limit_messages,
            self.options.rate_limit_window,
            clock=self._clock,
        )
        sender = RateLimitedSender(
            self, self.send_queue, self.shutdown_signal, bucket, sleep=self._sleep
        )
        self._sender_task = asyncio.create_task(sender.run(), name=f"irc-sender-{nick}")
        try:
            await receiver.run()
        finally:
            await self._stop_sender()
            logger.log_event("irc", "session_end", user=nick)

    async def _open(self, nick: str) -> asyncio.StreamReader:
        async with self._connect_lock:
            if self.connected():
                raise AlreadyConnectedError()
            logger.log_event(
                "irc",
                "connect_start",
                user=nick,
                server=self.options.host,
                port=self.options.port,
            )
            try:
                reader, writer = await self._transport_factory()
            except (TimeoutError, OSError) as e:
                logger.log_event(
                    "irc",
                    "dial_failed",
                    level=logging.ERROR,
                    user=nick,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise DialError(
                    f"Cannot connect to {self.options.host}:{self.options.port}: {e}",
                    data={"host": self.options.host, "port": self.options.port},
                ) from e
            with self._state_lock:
                self.nick = nick
                self.reader = reader
                self.writer = writer
                self.send_queue = asyncio.Queue(maxsize=self.options.send_queue_size)
                self.shutdown_signal = ShutdownSignal()
                self._loop = asyncio.get_running_loop()
                self._connected = True
            return reader

    async def _authenticate(
        self, nick: str, password: str, receiver: IRCReceiver
    ) -> None:
        await self.write(f"PASS {password}{IRC_LINE_DELIMITER}NICK {nick}{IRC_LINE_DELIMITER}")
        line = await receiver.read_line()
        message = parse_message(line)
        if message.command != IRC_WELCOME_NUMERIC:
            logger.log_event(
                "irc",
                "handshake_failed",
                level=logging.ERROR,
                user=nick,
                line=line.rstrip("\r\n"),
            )
            # The rejection usually arrives as a NOTICE worth delivering
            await self.dispatcher.dispatch(message)
            raise HandshakeError(line)
        caps = " ".join(f"{IRC_CAPABILITY_NAMESPACE}/{cap}" for cap in IRC_CAPABILITIES)
        await self.write(f"CAP REQ :{caps}{IRC_LINE_DELIMITER}")
        logger.log_event("irc", "connected", user=nick, capabilities=caps)

    def disconnect(self) -> None:
        """End the session. Only the first call while connected has an effect."""
        with self._state_lock:
            if not self._connected:
                return
            self._connected = False
            signal = self.shutdown_signal
            if signal is not None:
                signal.close()
        logger.log_event("irc", "disconnected", level=logging.WARNING, user=self.nick)

    def connected(self) -> bool:
        with self._state_lock:
            return self._connected

    async def _stop_sender(self) -> None:
        task = self._sender_task
        self._sender_task = None
        if task is not None:
            try:
                await asyncio.wait_for(task, timeout=SENDER_STOP_TIMEOUT)
            except TimeoutError:
                logger.log_event(
                    "irc",
                    "sender_stop_timeout",
                    level=logging.WARNING,
                    user=self.nick,
                    timeout=SENDER_STOP_TIMEOUT,
                )
            except Exception as e:  # noqa: BLE001
                log_error("Sender task failed", e, context={"user": self.nick})
        await self.close_transport()

    async def close_transport(self) -> None:
        writer = self.writer
        if writer is None or writer.is_closing():
            return
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.log_event(
                "irc",
                "close_error",
                level=logging.DEBUG,
                user=self.nick,
                error=str(e),
            )

    # ------------------------------------------------------------------ #
    # Transport I/O
    # ------------------------------------------------------------------ #
    async def write(self, data: str) -> None:
        """Write ``data`` to the server under the write deadline.

        Raises:
            WriteError: On any transport failure or when the deadline expires.
        """
        writer = self.writer
        if writer is None:
            raise WriteError("No transport to write to")
        logger.log_event(
            "irc",
            "raw_out",
            level=logging.DEBUG,
            user=self.nick,
            line=_PASS_RE.sub("PASS ***", data).rstrip("\r\n"),
        )
        try:
            writer.write(data.encode("utf-8"))
            await asyncio.wait_for(writer.drain(), timeout=self.options.write_timeout)
        except TimeoutError as e:
            raise WriteError(
                f"Write timed out after {self.options.write_timeout:g}s",
                data={"timeout": self.options.write_timeout},
            ) from e
        except OSError as e:
            raise WriteError(f"Write failed: {e}") from e

    def send(self, line: str) -> bool:
        """Queue ``line`` for the sender. Returns False when it was not queued.

        Safe to call from any thread. Off the event loop the line is handed to
        the loop and True only means it was handed over; a full queue then
        drops it from the loop side.
        """
        if not self.connected():
            logger.log_event(
                "irc", "send_skipped_disconnected", level=logging.DEBUG, user=self.nick
            )
            return False
        loop = self._loop
        if loop is not None and not _on_loop(loop):
            try:
                loop.call_soon_threadsafe(self._enqueue, line)
            except RuntimeError:
                # Loop already closed
                return False
            return True
        return self._enqueue(line)

    def _enqueue(self, line: str) -> bool:
        try:
            self.send_queue.put_nowait(line)
        except asyncio.QueueFull:
            logger.log_event(
                "irc",
                "send_queue_full",
                level=logging.WARNING,
                user=self.nick,
                line=line,
            )
            return False
        return True

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #
    def say(self, channel: str, text: str) -> None:
        self.send(f"PRIVMSG {format_channel(channel)} :{text}")

    def whisper(self, user: str, text: str) -> None:
        self.say(IRC_WHISPER_CHANNEL, f"/w {user} {text}")

    def join(self, channel: str) -> None:
        self.send(f"JOIN {format_channel(channel)}")

    def part(self, channel: str) -> None:
        self.send(f"PART {format_channel(channel)}")

    # ------------------------------------------------------------------ #
    # Listener registration
    # ------------------------------------------------------------------ #
    def _on(self, kind: EventKind, listener: Listener) -> Listener:
        self.registry.register(kind, listener)
        return listener

    def on_action(self, listener: Listener) -> Listener:
        """``listener(channel, tags, text)`` for /me messages."""
        return self._on(EventKind.ACTION, listener)

    def on_chat(self, listener: Listener) -> Listener:
        """``listener(channel, tags, text)`` for plain channel messages."""
        return self._on(EventKind.CHAT, listener)

    def on_cheer(self, listener: Listener) -> Listener:
        """``listener(channel, tags, text)`` for messages carrying bits."""
        return self._on(EventKind.CHEER, listener)

    def on_resub(self, listener: Listener) -> Listener:
        return self._on(EventKind.RESUB, listener)

    def on_subscription(self, listener: Listener) -> Listener:
        return self._on(EventKind.SUBSCRIPTION, listener)

    def on_subgift(self, listener: Listener) -> Listener:
        return self._on(EventKind.SUBGIFT, listener)

    def on_notice(self, listener: Listener) -> Listener:
        """``listener(text)`` for server NOTICE messages."""
        return self._on(EventKind.NOTICE, listener)

    def on_userstate(self, listener: Listener) -> Listener:
        """``listener(channel, tags)``."""
        return self._on(EventKind.USERSTATE, listener)

    def on_roomstate(self, listener: Listener) -> Listener:
        """``listener(channel, tags)``."""
        return self._on(EventKind.ROOMSTATE, listener)

    def on_join(self, listener: Listener) -> Listener:
        """``listener(channel, nick)``."""
        return self._on(EventKind.JOIN, listener)

    def on_part(self, listener: Listener) -> Listener:
        """``listener(channel, nick)``."""
        return self._on(EventKind.PART, listener)

    def on_whisper(self, listener: Listener) -> Listener:
        """``listener(nick, tags, text)``."""
        return self._on(EventKind.WHISPER, listener)
