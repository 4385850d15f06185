"""Read loop feeding server lines to the dispatcher."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, NoReturn

from ..errors import ReadError
from ..logs.logger import logger

if TYPE_CHECKING:  # pragma: no cover
    from .client import TwitchChatClient
    from .dispatcher import IRCDispatcher


class IRCReceiver:
    """Owns the blocking read loop of a session.

    Each read gets its own inactivity deadline. The loop never returns
    normally: any read failure disconnects the client and surfaces as
    :class:`ReadError`.
    """

    def __init__(
        self,
        client: TwitchChatClient,
        reader: asyncio.StreamReader,
        dispatcher: IRCDispatcher,
        read_timeout: float,
    ) -> None:
        self.client = client
        self.reader = reader
        self.dispatcher = dispatcher
        self.read_timeout = read_timeout

    async def read_line(self) -> str:
        try:
            data = await asyncio.wait_for(
                self.reader.readuntil(b"\n"), timeout=self.read_timeout
            )
        except TimeoutError as e:
            raise ReadError(
                f"No data from server for {self.read_timeout:g}s",
                data={"timeout": self.read_timeout},
            ) from e
        except asyncio.IncompleteReadError as e:
            raise ReadError("Connection closed by server") from e
        except (asyncio.LimitOverrunError, OSError) as e:
            raise ReadError(f"Read failed: {e}") from e
        line = data.decode("utf-8", errors="replace")
        logger.log_event(
            "irc",
            "raw_in",
            level=logging.DEBUG,
            user=self.client.nick,
            line=line.rstrip("\r\n"),
        )
        return line

    async def run(self) -> NoReturn:
        logger.log_event("irc", "receiver_start", level=logging.DEBUG, user=self.client.nick)
        while True:
            try:
                line = await self.read_line()
            except ReadError as e:
                logger.log_event(
                    "irc",
                    "read_failed",
                    level=logging.WARNING,
                    user=self.client.nick,
                    error=str(e),
                )
                self.client.disconnect()
                raise
            except asyncio.CancelledError:
                self.client.disconnect()
                raise
            await self.dispatcher.dispatch_line(line)
