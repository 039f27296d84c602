import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Dict, Optional


APP_LOGGER_NAME = "ledger_metrics"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_FILE_BYTES = 10 * 1024 * 1024  # 10MB

# Noisy libraries pinned to THIRD_PARTY_LOG_LEVEL
THIRD_PARTY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "sqlalchemy.orm",
    "alembic",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "faker",
)


def level_from_name(level_name: Optional[str], default: int) -> int:
    if not level_name:
        return default
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else default


def parse_module_levels(overrides: Optional[str]) -> Dict[str, int]:
    """
    Parse ``LOG_LEVELS`` style overrides, e.g.
    ``"crud.crud_kpi=DEBUG,services=WARNING"``, into logger names and levels.

    Names are resolved under the application logger. Entries without ``=`` or
    with an unknown level are ignored.
    """
    levels: Dict[str, int] = {}
    for entry in (overrides or "").split(","):
        name, separator, level_name = entry.partition("=")
        name = name.strip()
        if not separator or not name:
            continue
        level = level_from_name(level_name, default=-1)
        if level < 0:
            continue
        levels[get_logger(name).name] = level
    return levels


def setup_logging(
    app_log_level: Optional[str] = None,
    third_party_log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    module_levels: Optional[str] = None,
    max_file_size: int = MAX_LOG_FILE_BYTES,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure the ``ledger_metrics`` logger tree.

    Every argument falls back to an environment variable: APP_LOG_LEVEL
    (INFO), THIRD_PARTY_LOG_LEVEL (WARNING), LOG_FILE (console only when
    unset) and LOG_LEVELS for per-module overrides such as
    ``crud.crud_kpi=DEBUG`` while tracing KPI snapshots.
    """
    app_level = level_from_name(app_log_level or os.getenv("APP_LOG_LEVEL"), logging.INFO)
    third_party_level = level_from_name(
        third_party_log_level or os.getenv("THIRD_PARTY_LOG_LEVEL"), logging.WARNING
    )
    log_file = log_file or os.getenv("LOG_FILE")
    overrides = parse_module_levels(module_levels if module_levels is not None else os.getenv("LOG_LEVELS"))

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(app_level)
    app_logger.handlers.clear()
    app_logger.propagate = False

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    # Handlers pass everything; logger levels do the filtering
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_file_size, backupCount=backup_count
        ))
    for handler in handlers:
        handler.setLevel(logging.NOTSET)
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)

    for logger_name, level in overrides.items():
        logging.getLogger(logger_name).setLevel(level)

    for logger_name in THIRD_PARTY_LOGGERS:
        logging.getLogger(logger_name).setLevel(third_party_level)

    return app_logger


def get_logger(name: str = APP_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger nested under the application logger.

    Module names already inside the package (``ledger_metrics.crud.crud_kpi``)
    are used as-is; anything else is prefixed so it inherits the app handlers.
    """
    if name == APP_LOGGER_NAME or name.startswith(f"{APP_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
