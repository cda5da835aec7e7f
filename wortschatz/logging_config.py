"""Logging setup shared by the API server and the CLI."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from wortschatz.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_DETAILED = (
    "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
)

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("httpx", "openai", "aiosqlite")


def _file_handler() -> RotatingFileHandler:
    log_path = settings.resolved_log_file_path
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=log_path,
        maxBytes=settings.log_file_max_bytes,
        backupCount=settings.log_file_backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT_DETAILED))
    return handler


def setup_logging(console: bool = True) -> None:
    """Configure the root logger from settings.

    The API server logs to stdout. The CLI passes ``console=False`` so log
    records never interleave with Rich output; it only logs when the rotating
    file handler is enabled.
    """
    handlers: list[logging.Handler] = []
    if console:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(stream_handler)
    if settings.log_file_enabled:
        handlers.append(_file_handler())

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))

    # Remove existing handlers to avoid duplicates on reload
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    if not handlers:
        handlers.append(logging.NullHandler())
    for handler in handlers:
        root_logger.addHandler(handler)

    quiet_level = logging.DEBUG if settings.log_level == "DEBUG" else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
