"""
Tests for the logging setup.
"""
import logging
import logging.handlers

import pytest

from lib.setup_logger import LIBRARY_LEVELS, setup_logging


@pytest.fixture
def file_handler_cleanup():
    root_logger = logging.getLogger()
    previous_level = root_logger.level
    handlers = []

    yield handlers

    for handler in handlers:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(previous_level)


def test_creates_log_directory(tmp_path, file_handler_cleanup):
    log_file = tmp_path / "logs" / "tickets.log"

    handler = setup_logging(log_file=str(log_file))
    file_handler_cleanup.append(handler)

    assert isinstance(handler, logging.handlers.RotatingFileHandler)
    assert handler in logging.getLogger().handlers
    assert log_file.parent.is_dir()


def test_file_receives_records(tmp_path, file_handler_cleanup):
    log_file = tmp_path / "tickets.log"

    handler = setup_logging(log_file=str(log_file))
    file_handler_cleanup.append(handler)

    logging.getLogger("tickets").warning("ticket 12 closed")
    handler.flush()

    line = log_file.read_text(encoding="utf-8").strip()
    assert line.endswith("[tickets]: ticket 12 closed")
    assert "[WARNING ]" in line


def test_log_file_without_directory(tmp_path, monkeypatch, file_handler_cleanup):
    monkeypatch.chdir(tmp_path)

    handler = setup_logging(log_file="tickets.log")
    file_handler_cleanup.append(handler)

    assert (tmp_path / "tickets.log").exists()


def test_library_levels(tmp_path, file_handler_cleanup):
    file_handler_cleanup.append(setup_logging(log_file=str(tmp_path / "tickets.log")))

    for name, level in LIBRARY_LEVELS.items():
        assert logging.getLogger(name).level == level
