"""Structured event logger used across the client."""

from __future__ import annotations

import logging
import os


class ChatLogger:
    """Thin wrapper around a stdlib logger emitting named events.

    Every record is built from a ``(domain, action)`` pair plus keyword
    context. The human readable part comes from the event template catalog;
    with debug enabled the full context is appended to the line. Handlers are
    left to the root logger (see ``logging_config.LoggerConfigurator``).
    """

    def __init__(self, name: str = "twitch_chat") -> None:
        self.logger = logging.getLogger(name)
        self._debug = os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")
        if self._debug:
            self.logger.setLevel(logging.DEBUG)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)
        self._debug = level <= logging.DEBUG

    def is_debug_enabled(self) -> bool:
        return self._debug

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        event_name = f"{domain}_{action}".lower()
        human_text = human
        if human_text is None:
            # Local import to avoid cyclic import issues during module init.
            from .event_catalog import EVENT_TEMPLATES

            template = EVENT_TEMPLATES.get((domain, action))
            if template:
                try:
                    human_text = template.format(**kwargs)
                except (KeyError, IndexError, ValueError):
                    human_text = template
            else:
                human_text = f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
        self._log(level, event_name, human_text, exc_info=exc_info, **kwargs)

    def _log(
        self,
        level: int,
        event_name: str,
        human_text: str,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        user = kwargs.pop("user", None)
        channel = kwargs.pop("channel", None)
        prefix = self._build_prefix(
            user if isinstance(user, str) else None,
            channel if isinstance(channel, str) else None,
        )
        if self._debug:
            context = ", ".join(f"{k}={v}" for k, v in kwargs.items())
            # Pad the event name to a fixed column for alignment
            msg = f"{event_name.ljust(32)} {prefix} {human_text}"
            if context:
                msg = f"{msg} ({context})"
        else:
            msg = f"{prefix} {human_text}"
        self.logger.log(level, msg, exc_info=exc_info)

    @staticmethod
    def _build_prefix(user: str | None, channel: str | None) -> str:
        user_label = user or "system"
        core = f"{user_label}{channel}" if channel else user_label
        return f"[{core.ljust(24)[:24]}]"


logger = ChatLogger()
