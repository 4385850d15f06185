"""Listener storage keyed by event kind."""

from __future__ import annotations

import threading
from collections.abc import Callable
from enum import Enum
from typing import Any

Listener = Callable[..., Any]


class EventKind(Enum):
    ACTION = "action"
    CHAT = "chat"
    RESUB = "resub"
    NOTICE = "notice"
    USERSTATE = "userstate"
    ROOMSTATE = "roomstate"
    SUBGIFT = "subgift"
    SUBSCRIPTION = "subscription"
    CHEER = "cheer"
    JOIN = "join"
    PART = "part"
    WHISPER = "whisper"


class CallbackRegistry:
    """Append-only listener lists, one per :class:`EventKind`.

    ``register`` and ``snapshot`` share one mutex but neither holds it while
    listeners run: dispatch works on a copy, so a listener may register more
    listeners, and those only see later events.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: dict[EventKind, list[Listener]] = {
            kind: [] for kind in EventKind
        }

    def register(self, kind: EventKind, listener: Listener) -> None:
        if not callable(listener):
            raise TypeError(f"listener for {kind.value} must be callable")
        with self._lock:
            self._listeners[kind].append(listener)

    def snapshot(self, kind: EventKind) -> tuple[Listener, ...]:
        with self._lock:
            return tuple(self._listeners[kind])

    def count(self, kind: EventKind) -> int:
        with self._lock:
            return len(self._listeners[kind])
