# core/logging_config.py
"""Configure logging sinks and formatting for the requirement graph tooling.

This module configures:
- Standard library logging handlers (console and optional rotating file).
- Rich console integration when enabled.

Notes:
    This module performs side-effectful logger configuration and should be called once
    at process startup via [`core.logging_config.setup_logging()`](core/logging_config.py).
"""

import logging as stdlib_logging
import logging.handlers
import os

import structlog
from rich.logging import RichHandler

import config


def setup_logging(level: str | None = None) -> None:
    """Set up logging handlers and formatting.

    This configures:
    - Console logging in simple mode.
    - Rotating file logging when a log file is configured.
    - Rich console output when enabled.

    Args:
        level: Log level overriding ``config.settings.LOG_LEVEL_STR`` (e.g. from the CLI).

    Notes:
        This function replaces the root logger handler list and is intended to be called
        once during application startup.
    """
    settings = config.settings
    log_level = (level or settings.LOG_LEVEL_STR).upper()

    root_logger = stdlib_logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(log_level)

    if settings.SIMPLE_LOGGING_MODE:
        stream_handler = stdlib_logging.StreamHandler()
        stream_handler.setLevel(log_level)
        stream_handler.setFormatter(config.simple_formatter)
        root_logger.addHandler(stream_handler)
        root_logger.debug("Simple logging mode enabled: console only.")
        return

    if settings.LOG_FILE:
        log_path = os.path.join(settings.BASE_OUTPUT_DIR, settings.LOG_FILE)
        try:
            os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
            file_handler = stdlib_logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                mode="a",
                encoding="utf-8",
            )
        except OSError as e:
            fallback_handler = stdlib_logging.StreamHandler()
            fallback_handler.setFormatter(config.simple_formatter)
            root_logger.addHandler(fallback_handler)
            root_logger.error(f"Failed to configure file logging: {e}. Logging to console instead.")
        else:
            file_handler.setLevel(log_level)
            file_handler.setFormatter(config.simple_formatter)
            root_logger.addHandler(file_handler)
            root_logger.debug(f"File logging enabled. Log file: {log_path}")

    if settings.ENABLE_RICH_PROGRESS:
        rich_handler = RichHandler(
            level=log_level,
            rich_tracebacks=True,
            show_path=False,
            markup=True,
            show_time=False,  # Timestamp already in our formatter
            show_level=False,  # Level already in our formatter
        )
        rich_handler.setFormatter(config.rich_formatter)
        root_logger.addHandler(rich_handler)
    elif not any(type(h) is stdlib_logging.StreamHandler for h in root_logger.handlers):
        stream_handler = stdlib_logging.StreamHandler()
        stream_handler.setLevel(log_level)
        stream_handler.setFormatter(config.simple_formatter)
        root_logger.addHandler(stream_handler)

    structlog.get_logger(__name__).debug("Logging setup complete", level=log_level)
