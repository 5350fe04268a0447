# config/__init__.py
"""Expose requirement graph configuration as stable module-level constants.

This package is a facade over the Pydantic settings model defined in
[`config.settings`](config/settings.py). The primary API is the
[`settings`](config/settings.py) singleton plus module-level constants mirroring
its fields.

Configuration precedence and lifecycle:
- On initial import, configuration is loaded by importing [`config.settings`](config/settings.py),
  which constructs the `settings` singleton.
- Values come from the process environment and may be sourced from a `.env` file.
- [`reload()`](config/__init__.py) re-reads `.env` with override enabled, then replaces
  this module's exported values (see [`config.loader.reload_settings()`](config/loader.py)).

Notes:
    Readers that must observe a reload should go through `config.settings` rather
    than a constant captured at import time.
"""

from typing import Any

from .settings import (
    rich_formatter as rich_formatter,
)
from .settings import (
    settings as settings,
)
from .settings import (
    simple_formatter as simple_formatter,
)

AVAILABILITY_KEY = settings.AVAILABILITY_KEY
BASE_OUTPUT_DIR = settings.BASE_OUTPUT_DIR
CLOSURE_FACET = settings.CLOSURE_FACET
COLLECTION_SCHEMA_FILE = settings.COLLECTION_SCHEMA_FILE
DLC_PREDICATE_KEY = settings.DLC_PREDICATE_KEY
ENABLE_RICH_PROGRESS = settings.ENABLE_RICH_PROGRESS
JSON_INDENT = settings.JSON_INDENT
LOG_DATE_FORMAT = settings.LOG_DATE_FORMAT
LOG_FILE = settings.LOG_FILE
LOG_FORMAT = settings.LOG_FORMAT
LOG_LEVEL_STR = settings.LOG_LEVEL_STR
OUTPUT_FILE = settings.OUTPUT_FILE
SIMPLE_LOGGING_MODE = settings.SIMPLE_LOGGING_MODE
TRAIT_CLOSURE_FACET = settings.TRAIT_CLOSURE_FACET


def get(key: str) -> Any:
    """Return the value of a configuration attribute from `settings`.

    Raises:
        AttributeError: If `key` is not a valid attribute on `settings`.
    """
    return getattr(settings, key)


def set(key: str, value: Any) -> None:
    """Set a configuration attribute on `settings` at runtime.

    This mutates the in-memory settings instance and does not persist to `.env`.
    """
    setattr(settings, key, value)


def reload() -> bool:
    """Reload configuration and refresh this package's exported constants.

    Returns:
        True when the settings were rebuilt, False when the new values failed validation.
    """
    from .loader import reload_settings

    return reload_settings()
