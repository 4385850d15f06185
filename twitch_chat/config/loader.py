"""Configuration loading utilities."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import ConfigError
from ..logs.logger import logger
from .model import ClientOptions


def load_options(path: str | os.PathLike[str] | None = None) -> ClientOptions:
    """Load client options from a JSON file.

    A missing file yields the defaults. The file holds one JSON object whose
    keys are :class:`ClientOptions` fields.

    Raises:
        ConfigError: If the file is not valid JSON or fails validation.
    """
    if path is None:
        return ClientOptions()
    config_path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw: Any = json.load(f)
    except FileNotFoundError:
        logger.log_event(
            "config", "missing_file", level=logging.WARNING, path=str(config_path)
        )
        return ClientOptions()
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(
            f"Cannot read config file {config_path}: {e}", data={"path": str(config_path)}
        ) from e
    if not isinstance(raw, Mapping):
        raise ConfigError(
            f"Config file {config_path} must contain a JSON object",
            data={"path": str(config_path)},
        )
    options = _validate(raw, str(config_path))
    logger.log_event(
        "config",
        "loaded",
        level=logging.DEBUG,
        path=str(config_path),
        channels=len(options.channels),
    )
    return options


def options_from_env(
    base: ClientOptions | None = None, environ: Mapping[str, str] | None = None
) -> ClientOptions:
    """Overlay ``TWITCH_CHANNELS`` (comma separated) and ``DEBUG`` onto ``base``."""
    env = os.environ if environ is None else environ
    data = (base or ClientOptions()).model_dump()
    channels = env.get("TWITCH_CHANNELS")
    if channels:
        data["channels"] = list(data["channels"]) + channels.split(",")
    if env.get("DEBUG", "").lower() in ("true", "1", "yes"):
        data["debug"] = True
    return _validate(data, "environment")


def _validate(data: Mapping[str, Any], source: str) -> ClientOptions:
    try:
        return ClientOptions.model_validate(dict(data))
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration in {source}: {e}", data={"source": source}
        ) from e
