import logging
import pytest

from logger import get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = get_logger()
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_writes_dated_log_file(self, test_config):
        logger = setup_logging(test_config)

        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        [log_file] = list(test_config.log_dir.glob("budgetr-*.log"))
        assert "hello" in log_file.read_text()

    def test_info_to_stdout_warnings_to_stderr(self, test_config, capsys):
        logger = setup_logging(test_config)

        logger.info("normal output")
        logger.warning("careful")

        captured = capsys.readouterr()
        assert "normal output" in captured.out
        assert "careful" not in captured.out
        assert "WARNING: careful" in captured.err

    def test_repeated_setup_does_not_duplicate_handlers(self, test_config):
        setup_logging(test_config)
        logger = setup_logging(test_config)

        assert len(logger.handlers) == 3
        assert logger is get_logger()
        assert logger.level == logging.DEBUG
