"""
Unit tests for logging setup.
"""

import logging
from logging.handlers import RotatingFileHandler

from utils.logging_config import LOG_BACKUP_COUNT, LOG_MAX_BYTES, setup_logging


def test_console_only_without_file(tmp_path):
    logger = setup_logging("charter.tests.console", log_level="debug", log_dir=str(tmp_path))

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert not any(tmp_path.iterdir())


def test_rotating_file_handler(tmp_path):
    logger = setup_logging(
        "charter.tests.file", log_file="bot.log", log_dir=str(tmp_path / "logs")
    )

    file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].maxBytes == LOG_MAX_BYTES
    assert file_handlers[0].backupCount == LOG_BACKUP_COUNT
    assert (tmp_path / "logs").is_dir()
    for handler in logger.handlers:
        handler.close()


def test_second_call_adds_no_handlers(tmp_path):
    first = setup_logging("charter.tests.repeat", log_dir=str(tmp_path))
    second = setup_logging("charter.tests.repeat", log_level="ERROR", log_dir=str(tmp_path))

    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.INFO
