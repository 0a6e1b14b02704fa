"""Structlog events for pipeline runs, correlated by run id."""

import logging
import sys
import uuid
from typing import Any, Optional

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import JSONRenderer

from veritas_analysis.config.logging import console_output_enabled
from veritas_analysis.config.settings import settings


def configure_structured_logging() -> None:
    """
    Configure structlog with the same format and level as loguru.

    Uses:
    - Console renderer when console_output_enabled() holds
    - JSON renderer otherwise
    - Context binding for run_id
    """
    processors = [
        merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if console_output_enabled():
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    else:
        processors.append(JSONRenderer())

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_structured_logger(
    name: str,
    run_id: Optional[str] = None,
    **additional_context: Any,
) -> structlog.BoundLogger:
    """
    Get a structured logger with bound context.

    Args:
        name: Logger name (typically component name)
        run_id: Optional analysis run ID to bind
        **additional_context: Additional context to bind

    Returns:
        Configured BoundLogger instance with context

    Example:
        >>> logger = get_structured_logger("AnalysisPipeline", run_id=new_run_id())
        >>> logger.info("snapshot_fetched", nodes=120, edges=940)
    """
    logger = structlog.get_logger(name).bind(component=name)

    if run_id:
        logger = logger.bind(run_id=run_id)

    if additional_context:
        logger = logger.bind(**additional_context)

    return logger


def new_run_id() -> str:
    """Generate an ID for correlating the log events of one analysis run."""
    return str(uuid.uuid4())


configure_structured_logging()


__all__ = [
    "get_structured_logger",
    "new_run_id",
    "configure_structured_logging",
]
