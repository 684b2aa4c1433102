"""
Centralized logger configuration for copyplane.

Provides a unified logging interface that can be customized by the user.
By default, uses Python's standard logging with the 'copyplane' namespace.

Usage:
    # Use default logger
    from copyplane.core.logger import get_logger
    logger = get_logger(__name__)
    logger.info("Message")

    # Set custom logger (e.g., structlog, loguru)
    from copyplane.core.logger import set_logger
    import structlog
    set_logger(structlog.get_logger())
"""

import logging
from typing import Any

# Global logger instance - defaults to standard logging
_custom_logger: Any = None


def set_logger(logger: Any) -> None:
    """
    Set a custom logger for all copyplane components.

    Args:
        logger: A logger instance (e.g., structlog logger, loguru logger)
                Must support debug/info/warning/error/exception methods.
                Pass None to go back to standard logging.
    """
    global _custom_logger
    _custom_logger = logger


def resolve_logger(name: str = "copyplane") -> Any:
    """
    Return the logger currently in effect for ``name``.

    If a custom logger was set via set_logger(), returns that.
    Otherwise, returns a standard Python logger with the given name.
    """
    if _custom_logger is not None:
        return _custom_logger

    logger = logging.getLogger(name)

    # Library default: stay silent unless the host configures handlers
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


class ComponentLogger:
    """
    Module-level logger handle.

    Modules bind ``logger = get_logger(__name__)`` at import time; each call
    is forwarded to ``resolve_logger(name)``, so a logger installed later
    with set_logger() still receives every record.
    """

    def __init__(self, name: str):
        self.name = name

    def __getattr__(self, attr: str) -> Any:
        return getattr(resolve_logger(self.name), attr)

    def __repr__(self) -> str:
        return f"<ComponentLogger {self.name}>"


def get_logger(name: str = "copyplane") -> ComponentLogger:
    """
    Get a logger handle for a copyplane component.

    Usage:
        logger = get_logger(__name__)
        logger.warning("Message")
    """
    return ComponentLogger(name)


def configure_default_logging(  # pragma: no cover
    level: int | str = logging.INFO,
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
) -> None:
    """
    Configure basic console logging for copyplane.

    Args:
        level: Logging level, as an int or a level name such as "DEBUG"
        format_string: Log message format
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=format_string)
    logging.getLogger("copyplane").setLevel(level)
