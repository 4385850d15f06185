"""
Configuration constants for the Twitch chat client

This module contains the default values used throughout the client.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Attempts to parse the environment variable as a float. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Server endpoint
TWITCH_IRC_HOST = os.getenv("TWITCH_IRC_HOST", "irc.chat.twitch.tv")
TWITCH_IRC_PORT = _get_env_int("TWITCH_IRC_PORT", 6667)

# Connection deadlines
IRC_CONNECT_TIMEOUT = _get_env_float(
    "IRC_CONNECT_TIMEOUT", 10.0
)  # Seconds allowed for the TCP dial
IRC_READ_TIMEOUT = _get_env_float(
    "IRC_READ_TIMEOUT", 600.0
)  # Inactivity deadline per read (10 min; Twitch pings every ~5 min)
IRC_WRITE_TIMEOUT = _get_env_float(
    "IRC_WRITE_TIMEOUT", 60.0
)  # Deadline per write

# Outbound queue & flow control
IRC_SEND_QUEUE_SIZE = _get_env_int(
    "IRC_SEND_QUEUE_SIZE", 512
)  # Lines buffered before new ones are dropped
IRC_RATE_LIMIT_MESSAGES = _get_env_float(
    "IRC_RATE_LIMIT_MESSAGES", 19.0
)  # Token bucket capacity (Twitch allows 20 per 30s for regular users)
IRC_RATE_LIMIT_WINDOW = _get_env_float(
    "IRC_RATE_LIMIT_WINDOW", 30.0
)  # Seconds for the bucket to refill completely

# Protocol
IRC_WELCOME_NUMERIC = "001"
IRC_CAPABILITY_NAMESPACE = "twitch.tv"
IRC_CAPABILITIES = ("membership", "commands", "tags")
IRC_LINE_DELIMITER = "\r\n"
IRC_CTCP_ACTION_MARKER = "\x01ACTION"
IRC_WHISPER_CHANNEL = "#jtv"
