"""IRC message parsing utilities."""

from __future__ import annotations

from dataclasses import dataclass, field

# https://ircv3.net/specs/extensions/message-tags#escaping-values
_TAG_VALUE_ESCAPES = {
    ":": ";",
    "s": " ",
    "\\": "\\",
    "r": "\r",
    "n": "\n",
}


@dataclass
class Message:
    raw: str
    command: str
    params: list[str] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)
    prefix: str = ""
    nick: str = ""

    def param(self, index: int, default: str = "") -> str:
        """Return the parameter at ``index`` or ``default`` when absent."""
        if index < len(self.params):
            return self.params[index]
        return default


def parse_message(raw_line: str) -> Message:
    """Parse one raw line into a :class:`Message`.

    Grammar: ``[@tags ][:prefix ]COMMAND[ middle...][ :trailing]``. Lines
    without tags or prefix are fine; an empty line yields an empty command.
    """
    original = raw_line
    line = raw_line.rstrip("\r\n")
    tags: dict[str, str] = {}
    prefix = ""

    if line.startswith("@"):
        tags_part, _, line = line.partition(" ")
        tags = _parse_tags(tags_part[1:])
        line = line.lstrip(" ")

    if line.startswith(":"):
        prefix, _, line = line[1:].partition(" ")
        line = line.lstrip(" ")

    trailing: str | None = None
    if line.startswith(":"):
        line, trailing = "", line[1:]
    elif " :" in line:
        line, trailing = line.split(" :", 1)

    parts = line.split()
    command = parts[0].upper() if parts else ""
    params = parts[1:]
    if trailing is not None:
        params.append(trailing)

    return Message(
        raw=original,
        command=command,
        params=params,
        tags=tags,
        prefix=prefix,
        nick=_nick_from_prefix(prefix),
    )


def _parse_tags(raw_tags: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for tag in raw_tags.split(";"):
        if not tag:
            continue
        k, _, v = tag.partition("=")
        tags[k] = _unescape_tag_value(v)
    return tags


def _unescape_tag_value(value: str) -> str:
    if "\\" not in value:
        return value
    out: list[str] = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\":
            i += 1
            # A lone trailing backslash is dropped
            if i < len(value):
                nxt = value[i]
                out.append(_TAG_VALUE_ESCAPES.get(nxt, nxt))
        else:
            out.append(ch)
        i += 1
    return "".join(out)


def _nick_from_prefix(prefix: str) -> str:
    # nick!user@host, nick@host or a bare server name
    return prefix.split("!", 1)[0].split("@", 1)[0]


def format_channel(channel: str) -> str:
    """Return ``channel`` with a leading ``#``, adding it when missing."""
    if channel.startswith("#"):
        return channel
    return f"#{channel}"
