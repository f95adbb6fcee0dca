"""Dict-backed record used by the in-memory persistence layer."""

import copy
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

if TYPE_CHECKING:
    from infrastructure.persistence.memory import MemoryModel

_MISSING = object()


class Entity:
    """A single record: field values, existence flag and validation errors.

    Field values are reachable by item access (``entity["name"]``), by
    ``get``/``set`` and, for reads, by attribute access (``entity.name``).
    Keys may contain dots; ``get_path`` walks nested mappings instead.

    Attributes:
        errors: Validation messages per field from the last validation.
    """

    def __init__(
        self,
        data: Optional[Dict[str, Any]] = None,
        model: Optional["MemoryModel"] = None,
        exists: bool = False,
    ):
        self._data: Dict[str, Any] = copy.deepcopy(dict(data or {}))
        self._model = model
        self._exists = exists
        self.errors: Dict[str, List[str]] = {}

    @property
    def model(self) -> Optional["MemoryModel"]:
        return self._model

    def exists(self) -> bool:
        """Whether the record has already been persisted."""
        return self._exists

    def mark_persisted(self) -> None:
        self._exists = True

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def get_path(self, path: str, default: Any = None) -> Any:
        """Read a dotted path through nested mappings.

        A literal key containing dots wins over path traversal.

        Args:
            path: Key or dotted path (e.g. "i18n.name.it").
            default: Value returned when the path does not resolve.

        Returns:
            The value found, or default.
        """
        if path in self._data:
            return self._data[path]
        current: Any = self._data
        for part in path.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def set(self, name: Any, value: Any = _MISSING) -> None:
        """Assign one field, or several from a mapping.

        Args:
            name: Field name, or a mapping of field -> value.
            value: Value to assign when name is a field name.
        """
        if isinstance(name, dict):
            for key, item in name.items():
                self._data[key] = copy.deepcopy(item)
            return
        if value is _MISSING:
            raise TypeError("set() needs a value when called with a field name")
        self._data[name] = value

    def unset(self, name: str) -> None:
        self._data.pop(name, None)

    def has(self, name: str) -> bool:
        return name in self._data

    def keys(self) -> List[str]:
        return list(self._data.keys())

    def data(self) -> Dict[str, Any]:
        """Get a deep copy of all field values."""
        return copy.deepcopy(self._data)

    def clone(self) -> "Entity":
        """Create an independent copy sharing nothing mutable."""
        twin = Entity(self._data, model=self._model, exists=self._exists)
        twin.errors = copy.deepcopy(self.errors)
        return twin

    def add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def __getitem__(self, name: str) -> Any:
        return self._data[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self._data[name] = value

    def __delitem__(self, name: str) -> None:
        del self._data[name]

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __repr__(self) -> str:
        model = self._model.name if self._model is not None else None
        return f"Entity(model={model!r}, exists={self._exists}, data={self._data!r})"
