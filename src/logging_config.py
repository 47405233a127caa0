import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FILE = "inventory_api.log"

FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# loggers that are noisy at DEBUG or install their own handlers
_LIBRARY_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "aiohttp.access": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.INFO,
    "uvicorn.error": logging.INFO,
}

_handlers: list = []


def setup_logging(settings) -> str:
    """
    Attach a rotating file handler under `settings.log_dir` and a console
    handler at `settings.log_level` to the root logger.

    Calling it again replaces the handlers from the previous call, so a
    reloaded Settings.json takes effect. Returns the log file path.
    """
    os.makedirs(settings.log_dir, exist_ok=True)
    log_path = os.path.join(settings.log_dir, LOG_FILE)
    formatter = logging.Formatter(FORMAT)

    file_handler = RotatingFileHandler(log_path, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(settings.log_level.upper())
    console_handler.setFormatter(formatter)

    root = logging.getLogger()
    for handler in _handlers:
        root.removeHandler(handler)
        handler.close()
    _handlers[:] = [file_handler, console_handler]

    root.setLevel(logging.DEBUG)
    for handler in _handlers:
        root.addHandler(handler)

    for name, level in _LIBRARY_LEVELS.items():
        library_logger = logging.getLogger(name)
        library_logger.setLevel(level)
        library_logger.handlers.clear()
        library_logger.propagate = True

    root.info("[Logging] Writing %s", log_path)
    return log_path
