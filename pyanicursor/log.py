from __future__ import annotations
import logging, logging.handlers

from .config import APP_NAME, LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> logging.Logger:
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(level)

    # Clear duplicate handlers if reinit
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    log_file = log_file or LOG_FILE
    if log_file:
        fh = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        )
        fh.setFormatter(fmt)
        fh.setLevel(level)
        logger.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    ch.setLevel(level)
    logger.addHandler(ch)

    logger.debug("%s logging initialised • %s", APP_NAME, log_file or "console only")
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Return a logger under the package logger configured by setup_logging().
    Usage: from .log import get_logger; log = get_logger(__name__)
    """
    return logging.getLogger(name or APP_NAME)
