"""
Portal logger: console + optional rotating JSON file.

Usage:
    from ironease.core.logger import configure, get_logger, LoggerConfig

    configure(LoggerConfig(level="DEBUG", log_dir="/var/log/ironease"))
    configure()  # or from env: LOG_LEVEL, LOG_DIR, LOG_FILE_BASENAME, ...

    logger = get_logger(__name__)
    logger.info("Dispatcher: accepted", extra={"order_id": "ORD001"})
"""
from ironease.core.logger.config import LoggerConfig
from ironease.core.logger.formatters import JsonFormatter, PlainConsoleFormatter
from ironease.core.logger.setup import configure, get_logger

__all__ = [
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "configure",
    "get_logger",
]
