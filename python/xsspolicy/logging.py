"""Structured logging configuration using structlog.

Provides JSON-formatted logs with consistent context including:
- render_id: Correlation ID for the document being rendered (when set)
- timestamp: ISO8601 formatted timestamp

Usage:
    from xsspolicy.logging import get_logger, configure_logging

    # Configure once at startup (host applications may skip this and keep
    # their own structlog configuration)
    configure_logging()

    # Get a logger for a module
    logger = get_logger(__name__)
    logger.info("policy.something_happened", extra_field="value")

Rejection events emitted by PolicyStore.try_validate() carry the render_id so a
rejected attribute can be traced back to the document that produced it:
    set_render_context("doc-123")
    store.try_validate("a", "href", href)
    clear_render_context()
"""

import logging
import sys
from contextvars import ContextVar

import structlog

# Context variable for render-scoped logging
render_id_var: ContextVar[str | None] = ContextVar("render_id", default=None)


def add_render_context(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """Add render context to all log entries."""
    render_id = render_id_var.get()
    if render_id:
        event_dict["render_id"] = render_id
    return event_dict


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Configure structlog for the library.

    Args:
        json_format: If True, output JSON logs. If False, output console-friendly logs.
        level: Root logger level.
    """
    # Shared processors for both stdlib and structlog loggers
    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_render_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure stdlib logging to use structlog formatting
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger for the given name.

    Args:
        name: Logger name (typically __name__).

    Returns:
        A bound structlog logger.
    """
    return structlog.get_logger(name)


def set_render_context(render_id: str | None) -> None:
    """Set the render correlation ID for the current context."""
    render_id_var.set(render_id)


def clear_render_context() -> None:
    """Clear render-scoped context once the document is emitted."""
    render_id_var.set(None)


def get_render_id() -> str | None:
    """Get the current render ID from context."""
    return render_id_var.get()
