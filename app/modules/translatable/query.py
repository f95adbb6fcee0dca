"""Rewriting of find conditions that reference translated values.

Callers address translations with ``i18n.<field>.<locale>`` or
``<locale>.<field>`` keys, or with bare fields plus a ``locale`` find option.
The rewriter turns these into conditions the physical layout can answer.
Only flat equality-style conditions are supported on translated keys.
"""

from typing import Any, Dict, List, Optional, Tuple

from infrastructure.logging import get_module_logger
from modules.translatable.config import LOCALE_KEY, StorageStrategy, StrategyConfig
from modules.translatable.errors import (
    UnavailableFieldError,
    UnavailableLocaleError,
    UnsupportedConditionShapeError,
)
from modules.translatable.mapper import PATH_SEPARATOR
from modules.translatable.strategies import LOCALIZATIONS_KEY

logger = get_module_logger()

LOGICAL_OPERATORS = ("$or", "$and", "$nor")


def _is_operator_document(value: Any) -> bool:
    return isinstance(value, dict) and bool(value) and all(
        str(key).startswith("$") for key in value
    )


class QueryRewriter:
    """Rewrites condition mappings for one model's configuration."""

    def __init__(self, config: StrategyConfig):
        self.config = config

    def rewrite(
        self, conditions: Dict[str, Any], locale: Optional[str] = None
    ) -> Dict[str, Any]:
        """Rewrite conditions for the configured strategy.

        Args:
            conditions: Find conditions; left unchanged.
            locale: Locale that bare translatable fields refer to.

        Returns:
            New conditions. Keys without translation relevance pass through.

        Raises:
            UnsupportedConditionShapeError: For nested or logical conditions
                on translated values.
            UnavailableFieldError: If a qualified key names an unknown field.
            UnavailableLocaleError: If a locale is not configured.
        """
        if locale is not None and locale not in self.config.locales:
            raise UnavailableLocaleError(self.config.model, locale)

        references = self._collect(conditions)
        if self.config.strategy is StorageStrategy.NESTED:
            return dict(conditions)
        if self.config.strategy is StorageStrategy.INLINE:
            rewritten = self._rewrite_inline(conditions, references, locale)
        else:
            rewritten = self._rewrite_sub_records(conditions, references, locale)

        logger.debug(
            "conditions_rewritten",
            model=self.config.model,
            strategy=self.config.strategy.value,
            before=sorted(conditions),
            after=sorted(rewritten),
        )
        return rewritten

    def _collect(self, conditions: Dict[str, Any]) -> Dict[str, Tuple[str, str]]:
        """Validate condition shapes and find the locale-qualified keys."""
        references: Dict[str, Tuple[str, str]] = {}
        for key, value in conditions.items():
            if key in LOGICAL_OPERATORS:
                if self._mentions_translations(value):
                    raise UnsupportedConditionShapeError(
                        key, "logical operators over translated values"
                    )
                continue
            qualified = self._qualified(key, value)
            if qualified is not None:
                references[key] = qualified
        return references

    def _qualified(self, key: str, value: Any) -> Optional[Tuple[str, str]]:
        config = self.config
        parts = key.split(PATH_SEPARATOR)
        head = parts[0]

        if head == config.namespace:
            if len(parts) != 3:
                raise UnsupportedConditionShapeError(key)
            field, locale = parts[1], parts[2]
        elif head in config.locales and (len(parts) > 1 or isinstance(value, dict)):
            if len(parts) == 1:
                raise UnsupportedConditionShapeError(key)
            if parts[1] not in config.fields:
                return None
            if len(parts) != 2:
                raise UnsupportedConditionShapeError(key)
            field, locale = parts[1], head
        else:
            return None

        if field not in config.fields:
            raise UnavailableFieldError(config.model, field)
        if locale not in config.locales:
            raise UnavailableLocaleError(config.model, locale, field)
        if isinstance(value, dict) and not _is_operator_document(value):
            raise UnsupportedConditionShapeError(key)
        return field, locale

    def _mentions_translations(self, value: Any) -> bool:
        if isinstance(value, dict):
            for key, item in value.items():
                head = str(key).split(PATH_SEPARATOR)[0]
                if head == self.config.namespace or head in self.config.locales:
                    return True
                if self._mentions_translations(item):
                    return True
            return False
        if isinstance(value, list):
            return any(self._mentions_translations(item) for item in value)
        return False

    def _rewrite_inline(
        self,
        conditions: Dict[str, Any],
        references: Dict[str, Tuple[str, str]],
        locale: Optional[str],
    ) -> Dict[str, Any]:
        config = self.config
        rewritten: Dict[str, Any] = {}
        for key, value in conditions.items():
            if key in references:
                field, target = references[key]
            elif key in config.fields and locale is not None:
                field, target = key, locale
            else:
                rewritten[key] = value
                continue

            if config.is_canonical(target):
                rewritten[field] = value
            else:
                rewritten[config.inline_key(field, target)] = value
        return rewritten

    def _rewrite_sub_records(
        self,
        conditions: Dict[str, Any],
        references: Dict[str, Tuple[str, str]],
        locale: Optional[str],
    ) -> Dict[str, Any]:
        config = self.config
        locale_condition = conditions.get(LOCALE_KEY)
        if locale is None and isinstance(locale_condition, str):
            if locale_condition not in config.locales:
                raise UnavailableLocaleError(config.model, locale_condition)
            locale = locale_condition

        rewritten: Dict[str, Any] = {}
        elements: Dict[str, Dict[str, Any]] = {}
        for key, value in conditions.items():
            if key in references:
                field, target = references[key]
                elements.setdefault(target, {})[field] = value
            elif key in config.fields:
                if locale is not None:
                    elements.setdefault(locale, {})[key] = value
                else:
                    rewritten[f"{LOCALIZATIONS_KEY}{PATH_SEPARATOR}{key}"] = value
            elif key == LOCALE_KEY:
                if isinstance(value, str) and value == locale:
                    elements.setdefault(locale, {})
                else:
                    rewritten[f"{LOCALIZATIONS_KEY}{PATH_SEPARATOR}{key}"] = value
            else:
                rewritten[key] = value

        matchers: List[Dict[str, Any]] = [
            {LOCALIZATIONS_KEY: {"$elemMatch": {LOCALE_KEY: target, **criteria}}}
            for target, criteria in elements.items()
        ]
        if len(matchers) == 1:
            rewritten.update(matchers[0])
        elif matchers:
            rewritten["$and"] = list(rewritten.get("$and", [])) + matchers
        return rewritten


def rewrite_conditions(
    conditions: Dict[str, Any], config: StrategyConfig, locale: Optional[str] = None
) -> Dict[str, Any]:
    """Rewrite conditions with a throwaway QueryRewriter."""
    return QueryRewriter(config).rewrite(conditions, locale=locale)
