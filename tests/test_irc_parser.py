import pytest

from twitch_chat.irc.parser import format_channel, parse_message


def test_full_line_with_tags_prefix_and_trailing():
    msg = parse_message(
        "@badge-info=;color=#1E90FF;display-name=Alice :alice!alice@alice.tmi.twitch.tv"
        " PRIVMSG #foo :hello there\r\n"
    )
    assert msg.command == "PRIVMSG"
    assert msg.params == ["#foo", "hello there"]
    assert msg.tags == {"badge-info": "", "color": "#1E90FF", "display-name": "Alice"}
    assert msg.prefix == "alice!alice@alice.tmi.twitch.tv"
    assert msg.nick == "alice"


def test_line_without_tags_or_prefix():
    msg = parse_message("PING :tmi.twitch.tv")
    assert msg.command == "PING"
    assert msg.params == ["tmi.twitch.tv"]
    assert msg.tags == {}
    assert msg.nick == ""


def test_numeric_reply_with_server_prefix():
    msg = parse_message(":tmi.twitch.tv 001 bot :Welcome, GLHF!")
    assert msg.command == "001"
    assert msg.params == ["bot", "Welcome, GLHF!"]
    assert msg.nick == "tmi.twitch.tv"


def test_middle_params_without_trailing():
    msg = parse_message(":bob!bob@bob.tmi.twitch.tv JOIN #foo")
    assert msg.command == "JOIN"
    assert msg.params == ["#foo"]
    assert msg.nick == "bob"


def test_trailing_keeps_colons_and_spaces():
    msg = parse_message(":a!a@a PRIVMSG #foo :see https://example.com :)")
    assert msg.params[1] == "see https://example.com :)"


def test_empty_trailing_is_a_param():
    msg = parse_message(":a!a@a PRIVMSG #foo :")
    assert msg.params == ["#foo", ""]


def test_empty_line_has_empty_command():
    msg = parse_message("\r\n")
    assert msg.command == ""
    assert msg.params == []


def test_lowercase_command_is_normalized():
    assert parse_message("ping :x").command == "PING"


@pytest.mark.parametrize(
    "raw, expected",
    [
        (r"hello\sworld", "hello world"),
        (r"a\:b", "a;b"),
        (r"back\\slash", "back\\slash"),
        (r"line\rbreak\n", "line\rbreak\n"),
        ("trailing\\", "trailing"),
        (r"\x", "x"),
    ],
)
def test_tag_values_are_unescaped(raw, expected):
    msg = parse_message(f"@system-msg={raw} :tmi.twitch.tv USERNOTICE #foo")
    assert msg.tags["system-msg"] == expected


def test_tag_without_value():
    msg = parse_message("@emote-only;slow=0 :tmi.twitch.tv ROOMSTATE #foo")
    assert msg.tags == {"emote-only": "", "slow": "0"}


def test_param_accessor_defaults():
    msg = parse_message(":tmi.twitch.tv NOTICE #foo")
    assert msg.param(0) == "#foo"
    assert msg.param(1) == ""
    assert msg.param(5, "x") == "x"


def test_format_channel():
    assert format_channel("foo") == "#foo"
    assert format_channel("#foo") == "#foo"
