"""Routing of parsed server messages to registered listeners."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ..constants import IRC_CTCP_ACTION_MARKER
from ..logs.logger import logger
from .parser import Message, parse_message
from .registry import CallbackRegistry, EventKind

if TYPE_CHECKING:  # pragma: no cover
    from .client import TwitchChatClient

_USERNOTICE_KINDS = {
    "resub": EventKind.RESUB,
    "sub": EventKind.SUBSCRIPTION,
    "subgift": EventKind.SUBGIFT,
}


class IRCDispatcher:
    """Turns each :class:`Message` into listener calls, one message at a time.

    Listeners run in registration order inside the receiver task, so a slow
    listener holds back every message after it. Coroutine listeners are
    awaited before the next listener starts.
    """

    def __init__(self, client: TwitchChatClient, registry: CallbackRegistry):
        self.client = client
        self.registry = registry
        self._routes: dict[str, Callable[[Message], Awaitable[None]]] = {
            "PRIVMSG": self._handle_privmsg,
            "JOIN": self._handle_join,
            "PART": self._handle_part,
            "NOTICE": self._handle_notice,
            "USERSTATE": self._handle_userstate,
            "ROOMSTATE": self._handle_roomstate,
            "USERNOTICE": self._handle_usernotice,
            "WHISPER": self._handle_whisper,
            "PING": self._handle_ping,
        }

    async def dispatch_line(self, line: str) -> None:
        await self.dispatch(parse_message(line))

    async def dispatch(self, message: Message) -> None:
        handler = self._routes.get(message.command)
        if handler is None:
            return
        await handler(message)

    async def _handle_privmsg(self, message: Message) -> None:
        channel = message.param(0)
        text = message.param(1)
        if text.startswith(IRC_CTCP_ACTION_MARKER):
            await self._emit(EventKind.ACTION, channel, message.tags, _action_text(text))
        elif "bits" in message.tags:
            await self._emit(EventKind.CHEER, channel, message.tags, text)
        else:
            await self._emit(EventKind.CHAT, channel, message.tags, text)

    async def _handle_join(self, message: Message) -> None:
        await self._emit(EventKind.JOIN, message.param(0), message.nick)

    async def _handle_part(self, message: Message) -> None:
        await self._emit(EventKind.PART, message.param(0), message.nick)

    async def _handle_notice(self, message: Message) -> None:
        await self._emit(EventKind.NOTICE, message.param(1))

    async def _handle_userstate(self, message: Message) -> None:
        await self._emit(EventKind.USERSTATE, message.param(0), message.tags)

    async def _handle_roomstate(self, message: Message) -> None:
        await self._emit(EventKind.ROOMSTATE, message.param(0), message.tags)

    async def _handle_usernotice(self, message: Message) -> None:
        kind = _USERNOTICE_KINDS.get(message.tags.get("msg-id", ""))
        if kind is None:
            return
        await self._emit(kind, message.param(0), message.tags, message.param(1))

    async def _handle_whisper(self, message: Message) -> None:
        await self._emit(EventKind.WHISPER, message.nick, message.tags, message.param(1))

    async def _handle_ping(self, message: Message) -> None:
        self.client.send(f"PONG :{message.param(0)}")

    async def _emit(self, kind: EventKind, *args: object) -> None:
        for listener in self.registry.snapshot(kind):
            try:
                result = listener(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "dispatch",
                    "listener_error",
                    level=logging.ERROR,
                    user=self.client.nick,
                    event=kind.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )


def _action_text(text: str) -> str:
    # "\x01ACTION waves\x01" -> "waves"
    body = text[len(IRC_CTCP_ACTION_MARKER):]
    if body.startswith(" "):
        body = body[1:]
    return body.removesuffix("\x01")
