import asyncio
import logging

import pytest

from twitch_chat.errors import (
    AlreadyConnectedError,
    ConfigError,
    DialError,
    HandshakeError,
    ReadError,
    WriteError,
    log_error,
)
from twitch_chat.errors.handling import categorize_error
from twitch_chat.logging_config import error_aggregator


@pytest.mark.parametrize(
    "error, category",
    [
        (HandshakeError(":tmi.twitch.tv NOTICE * :Login authentication failed"), "handshake"),
        (DialError("refused"), "network"),
        (ReadError("eof"), "network"),
        (WriteError("broken pipe"), "network"),
        (ConnectionResetError(), "network"),
        (asyncio.TimeoutError(), "network"),
        (AlreadyConnectedError(), "state"),
        (ConfigError("bad"), "internal"),
        (RuntimeError("boom"), "unknown"),
    ],
)
def test_categorize_error(error, category):
    assert categorize_error(error) == category


def test_handshake_error_keeps_line():
    err = HandshakeError(":tmi.twitch.tv NOTICE * :Improperly formatted auth\r\n")
    assert err.line.endswith("\r\n")
    assert str(err) == "Unexpected server response: :tmi.twitch.tv NOTICE * :Improperly formatted auth"
    assert err.data == {"line": err.line}


def test_already_connected_default_message():
    assert str(AlreadyConnectedError()) == "Already connected"


def test_internal_error_data_is_copied():
    source = {"path": "a.json"}
    err = ConfigError("bad", data=source)
    source["path"] = "b.json"
    assert err.data == {"path": "a.json"}


def test_log_error_merges_error_data_and_context(caplog):
    err = ConfigError("bad file", data={"path": "chat.json"})
    with caplog.at_level(logging.ERROR):
        log_error("Config load failed", err, {"attempt": 1})
    assert "[INTERNAL] Config load failed: bad file" in caplog.text
    assert "path=chat.json | attempt=1" in caplog.text
    summary = error_aggregator.get_error_summary()
    assert summary["internal"]["total_count"] == 1
    assert summary["internal"]["last_occurrence"]["context"] == {
        "path": "chat.json",
        "attempt": 1,
    }


def test_log_error_without_context(caplog):
    with caplog.at_level(logging.ERROR):
        log_error("Write failed", WriteError("pipe closed"))
    assert "[NETWORK] Write failed: pipe closed" in caplog.text
    assert "Context:" not in caplog.text
    assert error_aggregator.get_error_summary()["network"]["total_count"] == 1
