"""
Centralized logging configuration for the TradeLens pipeline.

This module configures structlog once for every component. Normalization
steps log the corrections they apply to provider output so that a decision
returned to the user can be traced back to the raw values it came from.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_pipeline_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound to the analysis pipeline subsystem.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for pipeline steps
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="pipeline",
        audit_trail=True
    )


def log_correction(
    logger: FilteringBoundLogger,
    field: str,
    before: Any,
    after: Any,
    market: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a value correction applied to provider output.

    Args:
        logger: Structlog logger instance
        field: Name of the corrected field (e.g. "levels.entry")
        before: Value received from the provider
        after: Value after normalization
        market: Market whose rules drove the correction
        context: Additional context data
    """
    bound_logger = logger.bind(
        field=field,
        before=before,
        after=after,
        market=market,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.debug("Value corrected")
