"""Filter chains wrapping model operations.

A handler registered for an event receives the operation parameters and the
chain; it calls ``chain.next(params)`` to reach the next handler and, at the
end, the model's own implementation. Handlers run in registration order, the
first registered being the outermost.
"""

from typing import Any, Callable, Dict, List, Sequence

from infrastructure.logging import get_module_logger
from infrastructure.persistence.protocols import Handler

logger = get_module_logger()

EVENTS = ("create", "save", "find", "validates")


class Chain:
    """One position in a filter chain."""

    def __init__(
        self,
        handlers: Sequence[Handler],
        implementation: Callable[[Dict[str, Any]], Any],
        position: int = 0,
    ):
        self._handlers = handlers
        self._implementation = implementation
        self._position = position

    def next(self, params: Dict[str, Any]) -> Any:
        """Invoke the next handler, or the implementation once handlers run out.

        Args:
            params: Operation parameters, possibly rewritten by the caller.

        Returns:
            Whatever the rest of the chain returns.
        """
        if self._position < len(self._handlers):
            handler = self._handlers[self._position]
            following = Chain(self._handlers, self._implementation, self._position + 1)
            return handler(params, following)
        return self._implementation(params)


class FilterChain:
    """Registry of handlers per model operation."""

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {}

    def apply(self, event: str, handler: Handler) -> None:
        """Register a handler around an operation.

        Args:
            event: One of ``create``, ``save``, ``find``, ``validates``.
            handler: Callable receiving ``(params, chain)``.

        Raises:
            ValueError: If the event is not a filterable operation.
        """
        if event not in EVENTS:
            raise ValueError(f"Cannot filter unknown operation: {event}")
        self._handlers.setdefault(event, []).append(handler)
        logger.debug(
            "registered_filter",
            operation=event,
            handler=getattr(handler, "__name__", "unknown"),
            total_handlers=len(self._handlers[event]),
        )

    def run(
        self,
        event: str,
        params: Dict[str, Any],
        implementation: Callable[[Dict[str, Any]], Any],
    ) -> Any:
        """Run an operation through its handlers.

        Args:
            event: Operation name.
            params: Operation parameters.
            implementation: Innermost step performing the real work.

        Returns:
            Result of the chain.
        """
        handlers = tuple(self._handlers.get(event, ()))
        return Chain(handlers, implementation).next(params)

    def handlers_for(self, event: str) -> List[Handler]:
        """Get registered handlers for an operation."""
        return list(self._handlers.get(event, []))

    def clear(self) -> None:
        """Remove all handlers.

        WARNING: This is intended for testing only.
        """
        self._handlers.clear()
