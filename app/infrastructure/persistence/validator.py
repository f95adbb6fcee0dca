"""Rule-descriptor validation for records.

Rules are keyed by field (or dotted path) and hold an ordered list of rule
descriptors:

    {
        "name": [
            {"rule": "notEmpty", "message": "Name should not be empty."},
            {"rule": "lengthBetween", "min": 4, "max": 20, "message": "..."},
        ],
    }

A descriptor's ``required`` flag (default True) decides what happens when the
value is missing or None: required rules report their message, optional
rules are skipped.
"""

from typing import Any, Callable, Dict, List, Optional

from infrastructure.logging import get_module_logger

logger = get_module_logger()

_MISSING = object()

RuleCheck = Callable[[Any, Dict[str, Any]], bool]


def _not_empty(value: Any, rule: Dict[str, Any]) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return value not in (None, [], {})


def _length_between(value: Any, rule: Dict[str, Any]) -> bool:
    length = len(str(value))
    return rule.get("min", 0) <= length <= rule.get("max", length)


def _in_list(value: Any, rule: Dict[str, Any]) -> bool:
    return value in rule.get("list", [])


def _numeric(value: Any, rule: Dict[str, Any]) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(str(value))
    except ValueError:
        return False
    return True


DEFAULT_RULES: Dict[str, RuleCheck] = {
    "notEmpty": _not_empty,
    "lengthBetween": _length_between,
    "inList": _in_list,
    "numeric": _numeric,
}


def _lookup(data: Dict[str, Any], path: str) -> Any:
    if path in data:
        return data[path]
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


class Validator:
    """Applies rule descriptors to record data."""

    def __init__(self, rules: Optional[Dict[str, RuleCheck]] = None):
        self._rules: Dict[str, RuleCheck] = dict(DEFAULT_RULES)
        self._rules.update(rules or {})

    def add(self, name: str, check: RuleCheck) -> None:
        """Register a custom rule.

        Args:
            name: Rule name used in descriptors.
            check: Callable receiving ``(value, descriptor)``.
        """
        self._rules[name] = check

    def check(
        self, data: Dict[str, Any], rules: Dict[str, List[Dict[str, Any]]]
    ) -> Dict[str, List[str]]:
        """Validate data against rules.

        Args:
            data: Record data.
            rules: Rule descriptors keyed by field or dotted path.

        Returns:
            Error messages keyed by field; empty when the data is valid.

        Raises:
            ValueError: If a descriptor names an unknown rule.
        """
        errors: Dict[str, List[str]] = {}

        for field, descriptors in rules.items():
            value = _lookup(data, field)
            absent = value is _MISSING or value is None

            for descriptor in descriptors:
                name = descriptor.get("rule")
                if name not in self._rules:
                    raise ValueError(f"Unknown validation rule: {name}")
                message = descriptor.get("message", f"{field} is invalid ({name})")

                if absent:
                    if descriptor.get("required", True):
                        errors.setdefault(field, []).append(message)
                        break
                    continue
                if not self._rules[name](value, descriptor):
                    errors.setdefault(field, []).append(message)

        if errors:
            logger.debug("validation_failed", fields=sorted(errors))
        return errors
