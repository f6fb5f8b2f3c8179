"""Tests for utils logging functionality and the CLI logging setup."""

import io
import logging

import logging_config
from delta_arbitrage.utils import get_logger, log_humanized


def test_get_logger_basic():
    """Test basic get_logger functionality."""
    logger = get_logger(__name__)
    assert isinstance(logger, logging.Logger)
    assert logger.name == __name__


def test_get_logger_with_level():
    logger = get_logger(__name__ + ".test1", level=logging.DEBUG)
    assert logger.level == logging.DEBUG


def test_get_logger_structured_format():
    logger_name = __name__ + ".test3"
    logger = get_logger(logger_name, level=logging.INFO)

    captured_output = io.StringIO()
    original_stream = logger.handlers[0].stream
    logger.handlers[0].stream = captured_output
    try:
        logger.info("Test message")
    finally:
        logger.handlers[0].stream = original_stream

    log_output = captured_output.getvalue()
    assert "INFO" in log_output
    assert logger_name in log_output
    assert "Test message" in log_output
    assert "|" in log_output


def test_get_logger_no_duplicate_handlers():
    logger_name = __name__ + ".test4"
    logger1 = get_logger(logger_name)
    handler_count = len(logger1.handlers)
    logger2 = get_logger(logger_name)

    assert logger1 is logger2
    assert len(logger2.handlers) == handler_count == 1


def test_get_logger_does_not_propagate():
    logger = get_logger(__name__ + ".test5")
    assert logger.propagate is False


def test_get_logger_existing_logger_with_handlers():
    """A logger that already has handlers is left alone."""
    logger_name = __name__ + ".test6"
    existing_logger = logging.getLogger(logger_name)
    existing_handler = logging.StreamHandler()
    existing_logger.addHandler(existing_handler)

    new_logger = get_logger(logger_name)
    assert len(new_logger.handlers) == 1
    assert new_logger.handlers[0] is existing_handler


def test_log_humanized_two_decimals():
    logger = logging.getLogger(__name__ + ".test7")
    with_capture = io.StringIO()
    handler = logging.StreamHandler(with_capture)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        log_humanized(logger, "Wrapped native balance", 1_234_567_000_000)
    finally:
        logger.removeHandler(handler)
    assert with_capture.getvalue().strip() == "Wrapped native balance: 1234.57"


def test_logging_config_sets_app_logger_levels():
    app_logger = get_logger("delta_arbitrage.test_levels")
    try:
        logging_config.setup_minimal()
        assert app_logger.level == logging.WARNING
        assert logging.getLogger("web3").level == logging.WARNING

        logging_config.setup_debug()
        assert app_logger.level == logging.DEBUG
    finally:
        logging_config.setup(logging.INFO)
    assert app_logger.level == logging.INFO
