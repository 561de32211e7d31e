"""
Tests for logging setup.
"""

import logging

import pytest

from nodetree.core.observability.logging_config import parse_level, resolve_level, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLevels:

    def test_parse_level(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level("INFO") == logging.INFO
        assert parse_level(None) == logging.WARNING
        assert parse_level("bogus") == logging.WARNING

    def test_resolve_precedence(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("NODETREE_LOG_LEVEL", raising=False)
        assert resolve_level() == "WARNING"
        assert resolve_level(None, "INFO") == "INFO"
        monkeypatch.setenv("NODETREE_LOG_LEVEL", "ERROR")
        assert resolve_level(None, "INFO") == "ERROR"
        assert resolve_level("DEBUG", "INFO") == "DEBUG"


class TestSetupLogging:

    def test_console_level(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("NODETREE_LOG_FILE", raising=False)
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_log_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("NODETREE_LOG_FILE_LEVEL", raising=False)
        log_file = tmp_path / "nodetree.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        logging.getLogger("nodetree.test").debug("hello file")
        for handler in root.handlers:
            handler.flush()
        assert "hello file" in log_file.read_text()
