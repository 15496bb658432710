import logging

from meshsection.logging_config import setup_logging


def test_setup_logging_writes_file_once(tmp_path):
    log_file = tmp_path / "app.log"
    setup_logging(level=logging.DEBUG, log_file=str(log_file))
    setup_logging(level=logging.DEBUG, log_file=str(log_file))

    logger = logging.getLogger("meshsection")
    try:
        assert len(logger.handlers) == 2
        assert logger.level == logging.DEBUG
        logging.getLogger("meshsection.model.plane").debug("child message")
        for handler in logger.handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
        assert "Logging initialized." in text
        assert "child message" in text
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
