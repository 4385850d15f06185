from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..constants import (
    IRC_CONNECT_TIMEOUT,
    IRC_RATE_LIMIT_MESSAGES,
    IRC_RATE_LIMIT_WINDOW,
    IRC_READ_TIMEOUT,
    IRC_SEND_QUEUE_SIZE,
    IRC_WRITE_TIMEOUT,
    TWITCH_IRC_HOST,
    TWITCH_IRC_PORT,
)


class ClientOptions(BaseModel):
    """Settings for one chat client.

    Attributes:
        host: IRC server host name.
        port: IRC server port.
        channels: Channels joined right after the handshake (stored without '#').
        debug: Log raw traffic and full event context.
        connect_timeout: Seconds allowed for opening the TCP connection.
        read_timeout: Inactivity deadline applied to every read.
        write_timeout: Deadline applied to every write.
        send_queue_size: Outbound lines buffered before new ones are dropped.
        rate_limit_messages: Token bucket capacity.
        rate_limit_window: Seconds for the bucket to refill from empty.
    """

    host: str = Field(default=TWITCH_IRC_HOST, min_length=1)
    port: int = Field(default=TWITCH_IRC_PORT, gt=0, lt=65536)
    channels: list[str] = Field(default_factory=list)
    debug: bool = False
    connect_timeout: float = Field(default=IRC_CONNECT_TIMEOUT, gt=0)
    read_timeout: float = Field(default=IRC_READ_TIMEOUT, gt=0)
    write_timeout: float = Field(default=IRC_WRITE_TIMEOUT, gt=0)
    send_queue_size: int = Field(default=IRC_SEND_QUEUE_SIZE, gt=0)
    rate_limit_messages: float = Field(default=IRC_RATE_LIMIT_MESSAGES, ge=1)
    rate_limit_window: float = Field(default=IRC_RATE_LIMIT_WINDOW, gt=0)

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> list[str]:
        """Strip whitespace and leading '#', lower-case, drop empties and duplicates.

        Order is kept so channels are joined in the order they were configured.
        """
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, list | tuple):
            raise ValueError("channels must be a list")
        validated = []
        for c in v:
            if isinstance(c, str):
                stripped = c.strip().lstrip("#").lower()
                if stripped:
                    validated.append(stripped)
        return list(dict.fromkeys(validated))
