"""
Unit tests for logging setup.
"""

import logging

from gouse.utils.logger import LOG_FILE_NAME, LOGGER_NAME, get_logger, setup_logger


def test_setup_logger_writes_to_file(tmp_path):
    logger = setup_logger(level=logging.DEBUG, log_dir=tmp_path)
    logger.debug("hello from test")
    for handler in logger.handlers:
        handler.flush()

    assert get_logger() is logger
    assert logger.name == LOGGER_NAME
    assert "hello from test" in (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8")


def test_setup_logger_replaces_handlers(tmp_path):
    setup_logger(log_dir=tmp_path, log_to_console=True)
    logger = setup_logger(log_to_file=False, log_to_console=False)

    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.NullHandler)
