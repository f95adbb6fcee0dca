"""Collaborator contracts between record lifecycle hooks and a persistence layer.

The translatable core only depends on these protocols; any store whose
records and models provide the listed capabilities can host it.
"""

from typing import Any, Callable, Dict, Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class Chain(Protocol):
    """Next step of a filtered operation."""

    def next(self, params: Dict[str, Any]) -> Any:  # pragma: no cover - typing helper
        ...


Handler = Callable[[Dict[str, Any], Chain], Any]


@runtime_checkable
class Record(Protocol):
    """Capabilities a record must expose."""

    errors: Dict[str, list]

    def get(self, name: str, default: Any = None) -> Any:  # pragma: no cover
        ...

    def set(self, name: Any, value: Any = None) -> None:  # pragma: no cover
        ...

    def unset(self, name: str) -> None:  # pragma: no cover
        ...

    def has(self, name: str) -> bool:  # pragma: no cover
        ...

    def keys(self) -> Iterable[str]:  # pragma: no cover
        ...

    def exists(self) -> bool:  # pragma: no cover
        ...

    def clone(self) -> "Record":  # pragma: no cover
        ...


@runtime_checkable
class RecordModel(Protocol):
    """Model-level capabilities: hooks, schema introspection, ad hoc lookups."""

    name: str
    supports_arrays: bool
    rules: Dict[str, list]

    def apply_filter(self, event: str, handler: Handler) -> None:  # pragma: no cover
        ...

    def key(self) -> str:  # pragma: no cover
        ...

    def has_field(self, name: str) -> bool:  # pragma: no cover
        ...

    def find(self, type_: str = "all", **options: Any) -> Any:  # pragma: no cover
        ...

    def validates(
        self, entity: Record, rules: Optional[Dict[str, list]] = None
    ) -> bool:  # pragma: no cover
        ...
