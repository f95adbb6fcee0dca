"""Operation context binding for structured logging.

Binds operation-scoped context (correlation id, model, lifecycle operation)
to every log entry made while a record lifecycle hook runs.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(model="Artists", operation="save"):
        logger.info("merging_translations")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    model: Optional[str] = None,
    operation: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind operation-scoped context to all logs within the context manager.

    Nested blocks keep the outer correlation id unless a new one is given,
    so a save that triggers an internal find logs under a single id.

    Args:
        correlation_id: Unique operation identifier. Inherited from an
            enclosing block, or auto-generated.
        model: Name of the model the operation runs against.
        operation: Lifecycle operation (create, save, find, validates).
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        None - context is bound to structlog's context vars.
    """
    previous = structlog.contextvars.get_contextvars()
    context: dict[str, Any] = {
        "correlation_id": correlation_id
        or previous.get("correlation_id")
        or str(uuid.uuid4())
    }

    if model is not None:
        context["model"] = model

    if operation is not None:
        context["operation"] = operation

    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())
        restored = {key: previous[key] for key in context if key in previous}
        if restored:
            structlog.contextvars.bind_contextvars(**restored)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context.

    Returns:
        The correlation ID if set, None otherwise.
    """
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def clear_request_context() -> None:
    """Clear all operation-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
