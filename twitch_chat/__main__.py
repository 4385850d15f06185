#!/usr/bin/env python3
"""
Command-line runner: connect to Twitch chat and log channel events.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from .config import ClientOptions, load_options, options_from_env
from .errors import ChatClientError, ConfigError, DialError, HandshakeError, ReadError, log_error
from .irc import TwitchChatClient
from .logging_config import LoggerConfigurator
from .logs.logger import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twitch_chat", description="Connect to Twitch chat and log events"
    )
    parser.add_argument("--nick", required=True, help="Login name of the bot account")
    parser.add_argument(
        "--token",
        default=os.environ.get("TWITCH_TOKEN"),
        help="OAuth token (defaults to $TWITCH_TOKEN)",
    )
    parser.add_argument(
        "--config",
        default=os.environ.get("TWITCH_CHAT_CONF_FILE"),
        help="JSON options file",
    )
    parser.add_argument(
        "--channel",
        action="append",
        default=[],
        help="Channel to join (repeatable)",
    )
    parser.add_argument("--debug", action="store_true", help="Log raw traffic")
    return parser


def normalize_token(token: str) -> str:
    return token if token.startswith("oauth:") else f"oauth:{token}"


def resolve_options(args: argparse.Namespace) -> ClientOptions:
    options = options_from_env(load_options(args.config))
    data = options.model_dump()
    data["channels"] = list(options.channels) + list(args.channel)
    data["debug"] = options.debug or args.debug
    return ClientOptions.model_validate(data)


def register_log_listeners(client: TwitchChatClient) -> None:
    def on_chat(channel: str, tags: dict[str, str], text: str) -> None:
        author = tags.get("display-name") or "?"
        logger.log_event("chat", "privmsg", user=client.nick, channel=channel, author=author, text=text)

    def on_action(channel: str, tags: dict[str, str], text: str) -> None:
        author = tags.get("display-name") or "?"
        logger.log_event("chat", "action", user=client.nick, channel=channel, author=author, text=text)

    def on_cheer(channel: str, tags: dict[str, str], text: str) -> None:
        author = tags.get("display-name") or "?"
        logger.log_event(
            "chat", "cheer", user=client.nick, channel=channel, author=author, bits=tags.get("bits"), text=text
        )

    def on_notice(text: str) -> None:
        logger.log_event("chat", "notice", level=logging.WARNING, user=client.nick, text=text)

    def on_whisper(sender: str, tags: dict[str, str], text: str) -> None:  # noqa: ARG001
        logger.log_event("chat", "whisper", user=client.nick, author=sender, text=text)

    def on_join(channel: str, who: str) -> None:
        logger.log_event("chat", "join", level=logging.DEBUG, user=client.nick, channel=channel, author=who)

    def on_part(channel: str, who: str) -> None:
        logger.log_event("chat", "part", level=logging.DEBUG, user=client.nick, channel=channel, author=who)

    client.on_chat(on_chat)
    client.on_action(on_action)
    client.on_cheer(on_cheer)
    client.on_notice(on_notice)
    client.on_whisper(on_whisper)
    client.on_join(on_join)
    client.on_part(on_part)


async def run(args: argparse.Namespace) -> int:
    options = resolve_options(args)
    if options.debug:
        logger.set_level(logging.DEBUG)
    client = TwitchChatClient(options)
    register_log_listeners(client)
    logger.log_event("app", "start", user=args.nick.lower(), channels=len(options.channels))
    try:
        await client.connect(args.nick.lower(), normalize_token(args.token))
    except (DialError, HandshakeError) as e:
        log_error("Could not start chat session", e)
        return 1
    except ReadError as e:
        logger.log_event("app", "session_closed", level=logging.WARNING, user=args.nick.lower(), error=str(e))
        return 1
    finally:
        client.disconnect()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if not args.token:
        print("A token is required (--token or TWITCH_TOKEN)", file=sys.stderr)
        return 2
    LoggerConfigurator(debug=args.debug).configure()
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted", level=logging.WARNING)
        return 0
    except ConfigError as e:
        log_error("Configuration error", e)
        return 1
    except ChatClientError as e:
        log_error("Chat client error", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
