"""
Logging configuration

All application loggers hang off the "yarukoto" logger, which owns the
single stdout handler. Modules call get_logger(__name__).
"""
import logging
import sys
from yarukoto.config import get_settings

settings = get_settings()

ROOT_LOGGER_NAME = "yarukoto"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(debug: bool = settings.DEBUG) -> logging.Logger:
    """Attach the stdout handler to the application logger (idempotent)"""
    root = logging.getLogger(ROOT_LOGGER_NAME)

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    root.setLevel(logging.DEBUG if debug else logging.INFO)
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the application namespace"""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    setup_logging()
    return logging.getLogger(name)
