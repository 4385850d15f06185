"""Message templates for ``ChatLogger.log_event``, keyed by ``(domain, action)``."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

TEMPLATES_PATH = Path(__file__).with_name("event_templates.json")

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}


def _flatten(raw: Any) -> dict[tuple[str, str], str]:
    """``{"irc": {"connected": "..."}}`` -> ``{("irc", "connected"): "..."}``."""
    if not isinstance(raw, Mapping):
        return {}
    return {
        (domain, action): text
        for domain, actions in raw.items()
        if isinstance(domain, str) and isinstance(actions, Mapping)
        for action, text in actions.items()
        if isinstance(action, str) and isinstance(text, str)
    }


def reload_event_templates(path: Path | None = None) -> None:
    """Replace the catalog with ``path`` (the bundled JSON file by default).

    An unreadable file leaves only an ``("app", "load_error")`` entry.
    """
    global EVENT_TEMPLATES  # noqa: PLW0603
    source = TEMPLATES_PATH if path is None else Path(path)
    try:
        raw = json.loads(source.read_text(encoding="utf-8"))
    except FileNotFoundError:
        EVENT_TEMPLATES = {("app", "load_error"): f"Event templates not found: {source}"}
        return
    except (OSError, json.JSONDecodeError) as e:
        EVENT_TEMPLATES = {("app", "load_error"): f"Event templates unreadable: {e}"[:200]}
        return
    EVENT_TEMPLATES = _flatten(raw)


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "TEMPLATES_PATH", "reload_event_templates"]
