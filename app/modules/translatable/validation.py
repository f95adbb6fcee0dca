"""Relaxation of validation rules for translated values."""

import copy
from typing import Any, Dict, List

from modules.translatable.config import StrategyConfig
from modules.translatable.mapper import parse_qualified_key

Rules = Dict[str, List[Dict[str, Any]]]

MANDATORY_RULES = frozenset({"notEmpty", "required"})


class ValidationRelaxer:
    """Derives per-locale rules from a model's field rules.

    Only the canonical locale is mandatory: every translated locale of a
    field gets a copy of the field's rules that applies when a value is
    present and is skipped otherwise.
    """

    def __init__(self, config: StrategyConfig):
        self.config = config

    def relax(self, rules: Rules) -> Rules:
        """Build the relaxed rule set.

        Rules declared for a ``<locale>.<field>`` key are moved to the
        equivalent ``i18n.<field>.<locale>`` path. Explicit per-locale rules
        win over the copies derived from the field's rules.

        Args:
            rules: Rules keyed by field or path; not modified.

        Returns:
            New rules: the canonical field rules unchanged, plus optional
            rules for each translated locale.
        """
        relaxed: Rules = {}
        qualified = set()
        for key, descriptors in rules.items():
            parsed = parse_qualified_key(
                key, self.config.fields, self.config.locales, self.config.namespace
            )
            if parsed is None:
                relaxed.setdefault(key, copy.deepcopy(descriptors))
                continue
            path = self.config.path_key(*parsed)
            relaxed[path] = copy.deepcopy(descriptors)
            qualified.add(path)

        for field in self.config.fields:
            if field not in rules:
                continue
            for locale in self.config.translated_locales:
                path = self.config.path_key(field, locale)
                if path not in relaxed:
                    relaxed[path] = copy.deepcopy(rules[field])
                    qualified.add(path)

        for path in qualified:
            relaxed[path] = [
                dict(descriptor, required=False)
                for descriptor in relaxed[path]
                if descriptor.get("rule") not in MANDATORY_RULES
            ]
        return relaxed


def relax_rules(rules: Rules, config: StrategyConfig) -> Rules:
    return ValidationRelaxer(config).relax(rules)
