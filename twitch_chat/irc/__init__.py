"""IRC subsystem package.

Contains the message parser, listener registry, dispatcher, the sender and
receiver loops and the client tying them into one session.
"""

from .client import TwitchChatClient  # noqa: F401
from .connection import ShutdownSignal, tcp_transport_factory  # noqa: F401
from .dispatcher import IRCDispatcher  # noqa: F401
from .parser import Message, format_channel, parse_message  # noqa: F401
from .receiver import IRCReceiver  # noqa: F401
from .registry import CallbackRegistry, EventKind  # noqa: F401
from .sender import RateLimitedSender, TokenBucket  # noqa: F401

__all__ = [
    "CallbackRegistry",
    "EventKind",
    "IRCDispatcher",
    "IRCReceiver",
    "Message",
    "RateLimitedSender",
    "ShutdownSignal",
    "TokenBucket",
    "TwitchChatClient",
    "format_channel",
    "parse_message",
    "tcp_transport_factory",
]
