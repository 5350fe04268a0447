# config/loader.py
"""
Configuration reload utilities for the requirement graph tooling.

The main public function is ``reload_settings()`` which:
1. Reloads environment variables from ``.env`` (via ``dotenv.load_dotenv``).
2. Re-creates the ``ReqGraphSettings`` instance so that any changed values are applied.
3. Updates the symbols exported by ``config.__init__`` (the module-level globals)
   to reflect the new values.
"""

from __future__ import annotations

import importlib
from types import ModuleType

import structlog
from dotenv import load_dotenv
from pydantic import ValidationError

logger = structlog.get_logger(__name__)


def _import_settings_module() -> ModuleType:
    # ``config.settings`` as an attribute is the singleton, so go through the module registry.
    return importlib.import_module("config.settings")


def reload_settings() -> bool:
    """
    Reload configuration from the environment and refresh the ``config`` package.

    Returns ``True`` on success, ``False`` when the reloaded values fail validation.
    The previous settings stay in effect on failure.
    """
    load_dotenv(override=True)

    settings_mod = _import_settings_module()
    try:
        importlib.reload(settings_mod)
    except ValidationError as exc:
        logger.error("Configuration reload failed", error=str(exc))
        return False

    config_pkg = importlib.import_module("config")
    config_pkg.settings = settings_mod.settings
    config_pkg.simple_formatter = settings_mod.simple_formatter
    config_pkg.rich_formatter = settings_mod.rich_formatter

    for field_name in type(settings_mod.settings).model_fields:
        setattr(config_pkg, field_name, getattr(settings_mod.settings, field_name))

    logger.info("Configuration reloaded")
    return True
