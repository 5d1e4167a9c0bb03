"""
Logging setup for agentmem.

``setup_logging`` gives the root logger a single console handler, optionally
a file handler, and pins the level of noisy packages. Library modules never
configure logging themselves; they only call ``logging.getLogger(__name__)``.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from agentmem.core.config import LoggingConfig, settings

LOG_FILE_NAME = "agentmem.log"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

FORMATS: Dict[str, str] = {
    "simple": "%(levelname)s %(name)s: %(message)s",
    "detailed": "%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d] %(message)s",
    "json": (
        '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
        '"location": "%(filename)s:%(lineno)d", "message": "%(message)s"}'
    ),
}

# Levels applied on top of the root level
PACKAGE_LOG_LEVELS: Dict[str, str] = {
    "agentmem.core.database.repositories": "INFO",
    "agentmem.services": "DEBUG",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "alembic": "INFO",
    "aiosqlite": "WARNING",
    "asyncpg": "WARNING",
}


def _formatter(name: str) -> logging.Formatter:
    return logging.Formatter(FORMATS.get(name, FORMATS["detailed"]), datefmt=DATE_FORMAT)


def _build_handlers(
    config: LoggingConfig, level: str, formatter: logging.Formatter, enable_file: bool
) -> List[logging.Handler]:
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    handlers: List[logging.Handler] = [console]

    if enable_file and config.enable_file:
        directory = Path(config.file_dir)
        directory.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(directory / LOG_FILE_NAME, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    return handlers


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
    config: Optional[LoggingConfig] = None,
) -> None:
    """
    Configure process-wide logging.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        log_level: Console level; defaults to ``AGENTMEM_LOG_LEVEL``
        log_format: One of ``simple``, ``detailed`` or ``json``; unknown names fall back to ``detailed``
        enable_file: Set to False to suppress the file handler even when configured
        config: Logging section to use instead of ``settings.logging``
    """
    config = config or settings.logging
    level = (log_level or settings.agentmem_log_level).upper()
    fmt = log_format or config.format

    root_logger = logging.getLogger()
    # Handlers filter; the root passes everything through
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = _build_handlers(config, level, _formatter(fmt), enable_file)
    for handler in handlers:
        root_logger.addHandler(handler)

    for package, package_level in PACKAGE_LOG_LEVELS.items():
        logging.getLogger(package).setLevel(package_level)

    root_logger.debug("Logging configured: level=%s format=%s handlers=%d", level, fmt, len(handlers))


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` (usually ``__name__``)."""
    return logging.getLogger(name)
