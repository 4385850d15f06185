import json
import logging

from twitch_chat.logs import event_catalog
from twitch_chat.logs.logger import ChatLogger


def make_logger(name: str = "twitch_chat.test") -> ChatLogger:
    log = ChatLogger(name)
    log.set_level(logging.INFO)
    return log


def test_template_is_formatted_with_context(caplog):
    log = make_logger()
    with caplog.at_level(logging.INFO, logger="twitch_chat.test"):
        log.log_event("irc", "connect_start", user="bot", server="irc.example", port=6667)
    assert "Connecting to irc.example:6667" in caplog.text
    assert "[bot" in caplog.text


def test_unknown_event_gets_derived_text(caplog):
    log = make_logger()
    with caplog.at_level(logging.INFO, logger="twitch_chat.test"):
        log.log_event("some_domain", "odd_action")
    assert "some domain: odd action" in caplog.text


def test_template_missing_placeholder_falls_back_to_raw_template(caplog):
    log = make_logger()
    with caplog.at_level(logging.INFO, logger="twitch_chat.test"):
        log.log_event("irc", "read_failed", user="bot")
    assert "Read failed: {error}" in caplog.text


def test_channel_is_part_of_prefix(caplog):
    log = make_logger()
    with caplog.at_level(logging.INFO, logger="twitch_chat.test"):
        log.log_event("chat", "privmsg", user="bot", channel="#foo", author="alice", text="hi")
    assert "[bot#foo" in caplog.text
    assert "alice: hi" in caplog.text


def test_debug_mode_appends_context(caplog):
    log = ChatLogger("twitch_chat.test_debug")
    log.set_level(logging.DEBUG)
    with caplog.at_level(logging.DEBUG, logger="twitch_chat.test_debug"):
        log.log_event("irc", "raw_in", level=logging.DEBUG, user="bot", line="PING :x")
    assert "irc_raw_in" in caplog.text
    assert "> PING :x" in caplog.text
    assert "line=PING :x" in caplog.text


def test_disabled_level_is_skipped(caplog):
    log = make_logger()
    with caplog.at_level(logging.INFO, logger="twitch_chat.test"):
        log.log_event("irc", "raw_in", level=logging.DEBUG, line="x")
    assert caplog.text == ""


def test_reload_templates_from_custom_file(tmp_path):
    path = tmp_path / "templates.json"
    path.write_text(json.dumps({"x": {"y": "custom {value}"}}), encoding="utf-8")
    try:
        event_catalog.reload_event_templates(path)
        assert event_catalog.EVENT_TEMPLATES == {("x", "y"): "custom {value}"}
    finally:
        event_catalog.reload_event_templates()
    assert ("irc", "connected") in event_catalog.EVENT_TEMPLATES


def test_missing_template_file_records_load_error(tmp_path):
    try:
        event_catalog.reload_event_templates(tmp_path / "missing.json")
        assert ("app", "load_error") in event_catalog.EVENT_TEMPLATES
    finally:
        event_catalog.reload_event_templates()
