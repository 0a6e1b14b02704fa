"""Loguru setup for the veritas analyzers and CLI.

Both log streams (loguru here, structlog in utils.logging) render for humans
only when stderr is a terminal and VERITAS_LOG_FORMAT is "console". Anything
else gets one JSON object per line.
"""

import sys
from typing import Optional, TextIO

from loguru import logger

from veritas_analysis.config.settings import settings


def console_output_enabled(stream: Optional[TextIO] = None) -> bool:
    """True when logs should be colorized text instead of JSON lines."""
    stream = stream if stream is not None else sys.stderr
    return stream.isatty() and settings.log_format.lower() == "console"


def configure_logging() -> None:
    """
    Configure loguru from settings.

    Behavior:
    - Console output (see console_output_enabled): colorized lines tagged
      with the analyzer component
    - Otherwise: serialized JSON records to stderr
    - Level from VERITAS_LOG_LEVEL
    """
    logger.remove()
    logger.configure(extra={"component": "veritas"})

    if console_output_enabled():
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[component]}</cyan> | <level>{message}</level>",
            level=settings.log_level.upper(),
            colorize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level=settings.log_level.upper(),
            serialize=True,
            diagnose=False,
        )


def get_logger(component: str):
    """
    Get a logger bound to an analyzer or command name.

    Example:
        >>> log = get_logger("DeviationAnalyzer")
        >>> log.debug("Deviation measured", content_id="c-1")
    """
    return logger.bind(component=component)


configure_logging()

__all__ = ["logger", "get_logger", "configure_logging", "console_output_enabled"]
