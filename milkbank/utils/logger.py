"""Logging setup for the tracker.

Library modules do:

    from milkbank.utils.logger import get_logger
    logger = get_logger(__name__)

The Streamlit entry point calls `setup_logging(settings.log_level)` once.
Store writes and the snapshot watcher run on their own threads, so the
thread name is part of every line.
"""
import logging
from typing import Union

from milkbank.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s"

# Third-party loggers that are too chatty at INFO.
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


def resolve_level(level: Union[str, int, None]) -> int:
    """Map "debug"/"INFO"/20/None to a logging level, defaulting to INFO."""
    if isinstance(level, int):
        return level
    if not level:
        return logging.INFO
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Union[str, int, None] = None) -> None:
    if level is None:
        level = get_settings().log_level
    numeric = resolve_level(level)
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger("milkbank").setLevel(numeric)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
