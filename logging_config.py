import logging

from config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """
    Return a named logger with a single stream handler attached.

    The handler is only added once, so importing modules repeatedly
    (e.g. on Streamlit reruns) does not duplicate log lines.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, get_settings().log_level.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
