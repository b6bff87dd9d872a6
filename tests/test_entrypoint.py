# tests/test_entrypoint.py
"""Tests for app.py logging setup"""

import logging
from pathlib import Path

import pytest

import app as entrypoint


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging()"""

    def test_startup_log_truncated(self, tmp_path, monkeypatch, restore_root_logger):
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        log_file = tmp_path / ".codelingo" / "logs" / "startup.log"
        log_file.parent.mkdir(parents=True)
        log_file.write_text("previous run\n", encoding="utf-8")

        console_handler, file_handler = entrypoint.setup_logging()
        file_handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "previous run" not in content
        assert "CodeLingo starting..." in content
        assert console_handler.level == logging.INFO
        assert file_handler.level == logging.DEBUG

    def test_web_server_loggers_quieted(self, tmp_path, monkeypatch, restore_root_logger):
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        entrypoint.setup_logging()

        assert logging.getLogger('uvicorn').level == logging.WARNING
        assert logging.getLogger('starlette').level == logging.WARNING
