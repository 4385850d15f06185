import threading

import pytest

from twitch_chat.irc.registry import CallbackRegistry, EventKind


def test_every_kind_starts_empty():
    registry = CallbackRegistry()
    assert len(EventKind) == 12
    for kind in EventKind:
        assert registry.snapshot(kind) == ()


def test_listeners_kept_in_registration_order_per_kind():
    registry = CallbackRegistry()

    def a(*_):
        return None

    def b(*_):
        return None

    registry.register(EventKind.CHAT, a)
    registry.register(EventKind.CHAT, b)
    registry.register(EventKind.JOIN, b)
    assert registry.snapshot(EventKind.CHAT) == (a, b)
    assert registry.snapshot(EventKind.JOIN) == (b,)
    assert registry.count(EventKind.PART) == 0


def test_snapshot_is_not_affected_by_later_registration():
    registry = CallbackRegistry()
    registry.register(EventKind.CHAT, print)
    snap = registry.snapshot(EventKind.CHAT)
    registry.register(EventKind.CHAT, repr)
    assert snap == (print,)
    assert registry.count(EventKind.CHAT) == 2


def test_non_callable_rejected():
    registry = CallbackRegistry()
    with pytest.raises(TypeError):
        registry.register(EventKind.CHAT, "not callable")  # type: ignore[arg-type]


def test_concurrent_registration_loses_nothing():
    registry = CallbackRegistry()

    def worker():
        for _ in range(200):
            registry.register(EventKind.CHEER, lambda *a: None)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert registry.count(EventKind.CHEER) == 1600
