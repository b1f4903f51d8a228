"""Tests for loguru sink configuration."""

from loguru import logger

from token_pool.logging_conf import configure_logging


def test_file_sink_receives_debug_records(tmp_path):
    log_path = tmp_path / "token_pool.log"
    try:
        configure_logging(level="WARNING", log_file=str(log_path))
        logger.debug("sweep tick")
    finally:
        configure_logging(level="INFO", log_file="")

    assert "sweep tick" in log_path.read_text()


def test_console_only_when_no_file(tmp_path):
    configure_logging(level="INFO", log_file="")
    logger.info("console only")
    assert list(tmp_path.iterdir()) == []
