"""Condition matching for the in-memory store.

Supports the subset of document-store query semantics the application uses:

- ``{"name": "Richard"}``: equality; a missing field matches ``None``
- ``{"i18n.name.it": "Ricardo"}``: dotted paths into nested mappings; a list
  on the way fans out, matching if any element matches
- ``{"tags": "a"}``: equality against a list matches membership
- ``{"localizations": {"$elemMatch": {"locale": "it", "name": "X"}}}``
- ``{"locale": {"$in": ["en", "it"]}}``, ``{"name": {"$ne": None}}``
- ``{"$or": [...]}`` and ``{"$and": [...]}``
"""

from typing import Any, Dict, List

LOGICAL_OPERATORS = ("$or", "$and")


def _candidates(value: Any, parts: List[str]) -> List[Any]:
    if not parts:
        return [value]
    if isinstance(value, list):
        found: List[Any] = []
        for item in value:
            found.extend(_candidates(item, parts))
        return found
    if isinstance(value, dict) and parts[0] in value:
        return _candidates(value[parts[0]], parts[1:])
    return []


def _resolve(document: Dict[str, Any], key: str) -> List[Any]:
    if key in document:
        return [document[key]]
    return _candidates(document, key.split("."))


def _equals(candidate: Any, expected: Any) -> bool:
    if candidate == expected:
        return True
    return isinstance(candidate, list) and expected in candidate


def _match_operator(values: List[Any], operator: str, operand: Any) -> bool:
    if operator == "$elemMatch":
        return any(
            isinstance(item, dict) and matches(item, operand)
            for value in values
            if isinstance(value, list)
            for item in value
        )
    if operator == "$in":
        if not values:
            return None in operand
        return any(_equals(value, option) for value in values for option in operand)
    if operator == "$ne":
        return not _match_value(values, operand)
    if operator == "$exists":
        return bool(values) is bool(operand)
    raise ValueError(f"Unsupported condition operator: {operator}")


def _match_value(values: List[Any], expected: Any) -> bool:
    if isinstance(expected, dict) and expected and all(
        str(key).startswith("$") for key in expected
    ):
        return all(
            _match_operator(values, operator, operand)
            for operator, operand in expected.items()
        )
    if not values:
        return expected is None
    return any(_equals(value, expected) for value in values)


def matches(document: Dict[str, Any], conditions: Dict[str, Any]) -> bool:
    """Check whether a stored document satisfies all conditions.

    Args:
        document: Stored document.
        conditions: Mapping of key -> expected value or operator mapping.

    Returns:
        True if every condition holds.

    Raises:
        ValueError: If an unsupported operator is used.
    """
    for key, expected in (conditions or {}).items():
        if key == "$or":
            if not any(matches(document, branch) for branch in expected):
                return False
        elif key == "$and":
            if not all(matches(document, branch) for branch in expected):
                return False
        elif not _match_value(_resolve(document, key), expected):
            return False
    return True
