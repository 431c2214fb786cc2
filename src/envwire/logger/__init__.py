"""
envwire logger module.

Usage:
    from envwire.logger import get_logger

    logger = get_logger()              # name "envwire", prefix ENVWIRE
    logger.info("Loaded env files", files=2)

Environment Variables:
    {PREFIX}_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
    {PREFIX}_LOG_FILE: Optional file path for log output
    {PREFIX}_LOG_JSON: Set to "true" for JSON output format

    Where {PREFIX} is derived from the logger name ("envwire" -> "ENVWIRE",
    "envwire-web" -> "ENVWIRE_WEB").
"""

import logging
import os
from typing import Dict, Optional

from .interface import Logger
from .structured_logger import JsonFormatter, StructuredLogger, TextFormatter

_loggers: Dict[str, Logger] = {}


def _get_env_prefix(name: str) -> str:
    return name.upper().replace("-", "_").replace(".", "_")


def create_logger(
    name: str = "envwire",
    level: Optional[int] = None,
    log_file: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> Logger:
    """Create a new logger, filling unset options from the environment.

    Args:
        name: Logger name
        level: Logging level (defaults to {PREFIX}_LOG_LEVEL or WARNING)
        log_file: Optional file path for log output
        json_format: If True, output logs as JSON

    Returns:
        A configured Logger instance
    """
    env_prefix = _get_env_prefix(name)

    if level is None:
        level_str = os.environ.get(f"{env_prefix}_LOG_LEVEL", "WARNING").upper()
        level = getattr(logging, level_str, logging.WARNING)

    if log_file is None:
        log_file = os.environ.get(f"{env_prefix}_LOG_FILE")

    if json_format is None:
        json_format = os.environ.get(f"{env_prefix}_LOG_JSON", "false").lower() == "true"

    return StructuredLogger(
        name=name,
        level=level,
        log_file=log_file,
        json_format=json_format,
    )


def get_logger(name: str = "envwire") -> Logger:
    """Get the shared logger for ``name``, creating it on first use.

    Library code calls this at construction time, so the environment is
    read once per logger name.
    """
    if name not in _loggers:
        _loggers[name] = create_logger(name=name)
    return _loggers[name]


def reset_loggers() -> None:
    """Forget cached loggers (primarily for testing)."""
    _loggers.clear()


__all__ = [
    "Logger",
    "StructuredLogger",
    "JsonFormatter",
    "TextFormatter",
    "create_logger",
    "get_logger",
    "reset_loggers",
]
