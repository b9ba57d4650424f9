# src/core/logging_config.py
"""
Logging setup for the session service.

Levels, the log directory and file rotation come from Settings. Token
rejections are logged at DEBUG by the codec and adapter, so turning on
DEBUG is the way to see why a cookie was discarded.
"""

import re
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from src.core.config import Settings, settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Third-party loggers this stack pulls in; only their warnings are kept
QUIET_LOGGERS = (
    "uvicorn.access",
    "httpx",
    "httpcore",
    "jwcrypto",
    "werkzeug",
    "slowapi",
)


def log_file_name(app_name: str) -> str:
    """'JWT Session Service' -> 'jwt-session-service.log'"""
    slug = re.sub(r"[^a-z0-9]+", "-", app_name.lower()).strip("-")
    return f"{slug or 'sessions'}.log"


def resolve_log_level(config: Settings) -> str:
    return "DEBUG" if config.DEBUG else config.LOG_LEVEL.upper()


def setup_logging(config: Optional[Settings] = None) -> logging.Logger:
    """
    Configure the root logger for the service.

    Safe to call more than once: the console handler and the file handler
    for a given path are only attached once. The file handler is skipped
    when LOG_DIR is empty.
    """
    config = config or settings

    root_logger = logging.getLogger()
    root_logger.setLevel(resolve_log_level(config))
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # RotatingFileHandler is a StreamHandler subclass, so match the exact type
    if not any(type(h) is logging.StreamHandler for h in root_logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if config.LOG_DIR:
        log_dir = Path(config.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = (log_dir / log_file_name(config.APP_NAME)).resolve()

        if not any(isinstance(h, RotatingFileHandler) and h.baseFilename == str(log_file) for h in root_logger.handlers):
            file_handler = RotatingFileHandler(
                filename=str(log_file),
                maxBytes=config.LOG_MAX_BYTES,
                backupCount=config.LOG_BACKUP_COUNT,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
