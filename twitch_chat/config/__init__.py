"""Client configuration: the options model and its loaders."""

from .loader import load_options, options_from_env  # noqa: F401
from .model import ClientOptions  # noqa: F401

__all__ = ["ClientOptions", "load_options", "options_from_env"]
