"""
reflectkit logging configuration and context management.

Provides structured logging with context propagation using structlog.
Library modules obtain loggers through get_bound_logger(); applications may
call configure_structlog() at startup to choose level, format and sink.

Importing any reflectkit module configures structlog from the settings in
reflectkit.config. structlog.configure() is process-wide, so this replaces
an earlier structlog configuration made by the host application; call
configure_structlog(force=True) afterwards to override it. Stdlib handlers
are only attached to the "reflectkit" logger, which writes to stderr unless
a log file is set.
"""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import structlog

from .constants import DEFAULT_LOGGER_NAME

# Global flag to track if structlog has been configured
_STRUCTLOG_CONFIGURED = False


def configure_structlog(
    log_level: str = "INFO",
    log_format: str = "console",
    log_file: Optional[Path] = None,
    force: bool = False
) -> None:
    """
    Configure structlog with stdlib integration.

    The stdlib integration allows log level changes at runtime through
    set_log_level().

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ("json" or "console")
        log_file: Optional log file path
        force: Reconfigure even if already configured
    """
    global _STRUCTLOG_CONFIGURED

    # First call wins unless forced
    if _STRUCTLOG_CONFIGURED and not force:
        return

    log_level_numeric = getattr(logging, log_level.upper(), logging.INFO)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(str(log_file), mode='a')
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setLevel(log_level_numeric)

    timestamper = structlog.processors.TimeStamper(fmt="iso")

    # Shared processors for both structlog and stdlib logs
    shared_processors = [
        timestamper,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.contextvars.merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer() if log_format == "json" else structlog.dev.ConsoleRenderer(colors=False),
        foreign_pre_chain=shared_processors,
    )
    handler.setFormatter(formatter)

    # Only the package logger is touched; host application logging stays as is
    package_logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    for existing in package_logger.handlers[:]:
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level_numeric)
    package_logger.propagate = False

    _STRUCTLOG_CONFIGURED = True


def get_bound_logger(component: str, **default_context):
    """
    Get a bound logger with component identity and optional default context.

    Usage:
        logger = get_bound_logger("member_cache")
        logger.debug("cache.miss", type_name="Point")

    Args:
        component: Component name (e.g., "introspection", "member_cache")
        **default_context: Default context to bind to this logger instance

    Returns:
        Bound logger with component context
    """
    if not _STRUCTLOG_CONFIGURED:
        # Auto-configure from settings on first use
        from .config import config
        configure_structlog(
            log_level=config.get_log_level(),
            log_format=config.log_format,
            log_file=config.log_file,
        )

    base_logger = structlog.get_logger(DEFAULT_LOGGER_NAME)
    return base_logger.bind(component=component, **default_context)


@contextmanager
def operation_context(**context):
    """Context manager for temporary operation-specific context."""
    to_unbind = list(context.keys())
    if context:
        structlog.contextvars.bind_contextvars(**context)

    try:
        yield
    finally:
        if to_unbind:
            structlog.contextvars.unbind_contextvars(*to_unbind)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()


def set_log_level(level: str, logger_name: Optional[str] = DEFAULT_LOGGER_NAME) -> None:
    """
    Change log level at runtime.

    Args:
        level: New log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Logger to change (defaults to the package logger)
    """
    numeric = getattr(logging, level.upper(), logging.INFO)
    target_logger = logging.getLogger(logger_name)
    target_logger.setLevel(numeric)

    for handler in target_logger.handlers:
        handler.setLevel(numeric)
