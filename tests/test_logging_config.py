# tests/test_logging_config.py
import logging
import logging.handlers

import pytest
from rich.logging import RichHandler

import config
from core.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.handlers.RotatingFileHandler, RichHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestSetupLogging:
    def test_simple_mode_is_console_only(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config.settings, "SIMPLE_LOGGING_MODE", True)
        setup_logging("warning")
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert type(root.handlers[0]) is logging.StreamHandler

    def test_file_and_rich_handlers(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        monkeypatch.setattr(config.settings, "SIMPLE_LOGGING_MODE", False)
        monkeypatch.setattr(config.settings, "ENABLE_RICH_PROGRESS", True)
        monkeypatch.setattr(config.settings, "BASE_OUTPUT_DIR", str(tmp_path))
        monkeypatch.setattr(config.settings, "LOG_FILE", "logs/reqgraph.log")
        setup_logging()
        handler_types = {type(handler) for handler in logging.getLogger().handlers}
        assert handler_types == {logging.handlers.RotatingFileHandler, RichHandler}
        assert (tmp_path / "logs" / "reqgraph.log").exists()

    def test_plain_console_without_rich(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config.settings, "SIMPLE_LOGGING_MODE", False)
        monkeypatch.setattr(config.settings, "ENABLE_RICH_PROGRESS", False)
        monkeypatch.setattr(config.settings, "LOG_FILE", None)
        setup_logging("INFO")
        handlers = logging.getLogger().handlers
        assert [type(handler) for handler in handlers] == [logging.StreamHandler]
