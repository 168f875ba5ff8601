import logging

from spruce.app.core.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> logging.Logger:
    """
    Attach a console handler to the ``spruce`` logger.
    Safe to call more than once; handlers are only added the first time.
    """
    logger = logging.getLogger("spruce")
    logger.setLevel(level or get_settings().log_level)

    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)
    return logger
