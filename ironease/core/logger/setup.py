"""
Logger setup: attach console and rotating JSON file handlers from config.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from ironease.core.logger.config import LoggerConfig
from ironease.core.logger.formatters import JsonFormatter, PlainConsoleFormatter

_default_config: Optional[LoggerConfig] = None


def configure(config: Optional[LoggerConfig] = None) -> logging.Logger:
    """
    Configure the package root logger. If config is None, uses LoggerConfig.from_env().
    Call once at application startup; calling again replaces the handlers.
    """
    global _default_config
    if config is None:
        config = LoggerConfig.from_env()
    _default_config = config

    level = getattr(logging, config.level.upper(), logging.INFO)
    root = logging.getLogger(config.root_name)
    root.setLevel(level)

    # Avoid duplicate handlers when reconfigured (e.g. in tests)
    root.handlers.clear()

    if config.console:
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(PlainConsoleFormatter())
        root.addHandler(console)

    if config.log_dir and config.log_dir.strip():
        try:
            os.makedirs(config.log_dir, exist_ok=True)
        except OSError:
            root.warning("Could not create log dir %s, skipping file handler", config.log_dir)
        else:
            path = os.path.join(config.log_dir, f"{config.log_file_basename}.log")
            file_handler = RotatingFileHandler(
                path,
                maxBytes=config.max_bytes,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(JsonFormatter())
            root.addHandler(file_handler)

    root.propagate = False
    return root


def get_logger(name: str, config: Optional[LoggerConfig] = None) -> logging.Logger:
    """
    Return a logger for the given name, configuring the root on first use.
    Use get_logger(__name__) from ironease modules so names stay under the configured root.
    """
    if _default_config is None:
        configure(config)
    return logging.getLogger(name)
