"""
Centralized logging configuration for the LoopLens agent.

This module provides standardized logging configuration using structlog
for all components. Pipeline steps, arbitration and ledger commits all log
through loggers obtained here so that every run leaves a consistent,
structured audit trail.
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
    logging.getLogger().setLevel(log_level)

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
    Get a logger bound to the pipeline subsystem.

    Used by the orchestrator and the arbiter, whose decisions form the
    per-run audit trail.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for pipeline steps
    """
    return structlog.get_logger(name, subsystem="pipeline", audit_trail=True)


def get_ledger_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound to the ledger subsystem.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for ledger submissions
    """
    return structlog.get_logger(name, subsystem="ledger", audit_trail=True)


def log_stage_failure(
    logger: FilteringBoundLogger,
    stage: str,
    error: BaseException,
    recovered: bool,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a failed pipeline step with standardized format.

    Args:
        logger: Structlog logger instance
        stage: Pipeline step that failed (fetch, arbitrate, commit, ...)
        error: The exception raised by the step
        recovered: Whether the step degraded gracefully
        context: Parameters of the step, for diagnosis
    """
    bound_logger = logger.bind(
        stage=stage,
        error_type=type(error).__name__,
        error=str(error),
        recovered=recovered,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if recovered:
        bound_logger.warning("Pipeline step degraded")
    else:
        bound_logger.error("Pipeline step failed")


def log_commit_result(
    logger: FilteringBoundLogger,
    market_id: str,
    transaction_hash: str,
    block_number: int,
    gas_used: int,
    explorer_url: Optional[str] = None
) -> None:
    """
    Log a confirmed market creation with standardized format.

    Args:
        logger: Structlog logger instance
        market_id: Ledger-derived market id
        transaction_hash: Hash of the confirmed transaction
        block_number: Block the transaction was included in
        gas_used: Gas consumed by the transaction
        explorer_url: Block explorer link for the transaction
    """
    logger.info(
        "Market created",
        market_id=market_id,
        transaction_hash=transaction_hash,
        block_number=block_number,
        gas_used=gas_used,
        explorer_url=explorer_url,
    )
