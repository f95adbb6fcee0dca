"""In-memory model implementing the persistence collaborator contract.

Documents are stored as plain dicts keyed by primary key. Saving an existing
record updates only the top-level keys it carries; keys the record does not
hold are left untouched in storage, while a structured value held under a
top-level key replaces the stored one wholesale.
"""

import copy
import itertools
from typing import Any, Dict, Iterable, List, Optional, Union

from infrastructure.logging import get_module_logger
from infrastructure.persistence.conditions import matches
from infrastructure.persistence.entity import Entity
from infrastructure.persistence.filters import FilterChain
from infrastructure.persistence.protocols import Handler
from infrastructure.persistence.validator import Validator

logger = get_module_logger()

FIND_TYPES = ("first", "all", "count")


class MemoryModel:
    """A filterable model over an in-memory document store.

    Attributes:
        name: Model name, used in logs and error messages.
        supports_arrays: Whether the store holds structured and list values natively.
        rules: Default validation rules keyed by field.
    """

    def __init__(
        self,
        name: str,
        *,
        key: str = "_id",
        schema: Optional[Iterable[str]] = None,
        supports_arrays: bool = True,
        rules: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        validator: Optional[Validator] = None,
    ):
        """Initialize the model.

        Args:
            name: Model name.
            key: Primary key field name.
            schema: Known field names; None for a schemaless store.
            supports_arrays: Whether structured values are stored natively.
            rules: Default validation rules.
            validator: Validator instance (default: a new Validator).
        """
        self.name = name
        self.supports_arrays = supports_arrays
        self.rules: Dict[str, List[Dict[str, Any]]] = copy.deepcopy(rules or {})
        self._key = key
        self._schema = frozenset(schema) if schema is not None else None
        self._validator = validator or Validator()
        self._filters = FilterChain()
        self._documents: Dict[Any, Dict[str, Any]] = {}
        self._sequence = itertools.count(1)

    def key(self) -> str:
        """Primary key field name."""
        return self._key

    def has_field(self, name: str) -> bool:
        """Check the schema for a field; schemaless stores accept any name."""
        if self._schema is None:
            return True
        return name in self._schema

    def apply_filter(self, event: str, handler: Handler) -> None:
        """Register a handler around create, save, find or validates."""
        self._filters.apply(event, handler)

    def create(self, data: Optional[Dict[str, Any]] = None, **options: Any) -> Entity:
        """Build a new, unsaved record.

        Args:
            data: Initial field values.
            **options: Options forwarded to filters.

        Returns:
            Entity instance.
        """
        params = {"data": dict(data or {}), "options": options}
        return self._filters.run("create", params, self._create)

    def save(
        self, entity: Entity, data: Optional[Dict[str, Any]] = None, **options: Any
    ) -> bool:
        """Validate and persist a record.

        Args:
            entity: Record to save.
            data: Field assignments merged into the record before saving.
            **options: ``validate`` (default True), ``rules`` override, and
                options understood by filters.

        Returns:
            True if written, False if validation failed.
        """
        params = {"entity": entity, "data": data, "options": options}
        return self._filters.run("save", params, self._save)

    def find(
        self, type_: str = "all", **options: Any
    ) -> Union[Entity, List[Entity], int, None]:
        """Query records.

        Args:
            type_: ``first``, ``all`` or ``count``.
            **options: ``conditions``, ``limit``, and options understood by filters.

        Returns:
            A record or None for ``first``, a list for ``all``, an int for ``count``.

        Raises:
            ValueError: If the find type is unknown.
        """
        if type_ not in FIND_TYPES:
            raise ValueError(f"Unknown find type: {type_}")
        params = {"type": type_, "options": options}
        return self._filters.run("find", params, self._find)

    def first(self, **options: Any) -> Optional[Entity]:
        return self.find("first", **options)

    def all(self, **options: Any) -> List[Entity]:
        return self.find("all", **options)

    def count(self, **options: Any) -> int:
        return self.find("count", **options)

    def validates(
        self, entity: Entity, rules: Optional[Dict[str, List[Dict[str, Any]]]] = None
    ) -> bool:
        """Validate a record, storing messages on ``entity.errors``.

        Args:
            entity: Record to validate.
            rules: Rules to apply instead of the model defaults.

        Returns:
            True if the record is valid.
        """
        params = {"entity": entity, "options": {"rules": rules}}
        return self._filters.run("validates", params, self._validates)

    def remove(self, conditions: Optional[Dict[str, Any]] = None) -> int:
        """Delete matching documents (all documents without conditions).

        Returns:
            Number of documents removed.
        """
        doomed = [
            key
            for key, document in self._documents.items()
            if matches(document, conditions or {})
        ]
        for key in doomed:
            del self._documents[key]
        return len(doomed)

    def _create(self, params: Dict[str, Any]) -> Entity:
        return Entity(params["data"], model=self)

    def _save(self, params: Dict[str, Any]) -> bool:
        entity: Entity = params["entity"]
        options = params["options"]
        if params.get("data"):
            entity.set(params["data"])

        if options.get("validate", True) and not self.validates(
            entity, rules=options.get("rules")
        ):
            logger.info("save_rejected_by_validation", model=self.name)
            return False

        document = entity.data()
        primary = document.get(self._key)
        stored = self._documents.get(primary) if primary is not None else None

        if entity.exists() and stored is not None:
            stored.update(document)
        else:
            if primary is None:
                primary = next(self._sequence)
                document[self._key] = primary
                entity[self._key] = primary
            self._documents[primary] = document
        entity.mark_persisted()

        logger.debug("document_saved", model=self.name, key=primary)
        return True

    def _find(self, params: Dict[str, Any]) -> Union[Entity, List[Entity], int, None]:
        options = params["options"]
        documents = [
            document
            for document in self._documents.values()
            if matches(document, options.get("conditions") or {})
        ]
        if options.get("limit"):
            documents = documents[: options["limit"]]

        if params["type"] == "count":
            return len(documents)
        records = [Entity(document, model=self, exists=True) for document in documents]
        if params["type"] == "first":
            return records[0] if records else None
        return records

    def _validates(self, params: Dict[str, Any]) -> bool:
        entity: Entity = params["entity"]
        rules = params["options"].get("rules")
        if rules is None:
            rules = self.rules
        entity.errors = self._validator.check(entity.data(), rules)
        return not entity.errors
