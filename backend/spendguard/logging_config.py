"""Logging configuration for the API."""
import logging

from .config import LOG_LEVEL

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def setup_logging() -> None:
    """Configure the root logger once at startup."""

    level = getattr(logging, LOG_LEVEL, logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    # httpx logs every request URL, which includes the Gemini API key
    logging.getLogger("httpx").setLevel(logging.WARNING)
