# modules/translatable/__init__.py
"""Locale-aware field synchronization for persisted records.

A model declares which of its fields are translatable and in which locales.
The behavior keeps canonical values in the bare fields, exposes every
translation through a per-record map, and stores translations with one of
three layouts:

- inline: sibling fields named ``i18n_<field>_<locale>``
- nested: one structured value ``{field: {locale: value}}``
- subrecord: a list of locale-tagged sub-records

Usage:
    from modules.translatable import Translatable

    Translatable(artists, {"fields": ["name"], "locales": ["en", "ja"], "locale": "ja"})
"""

from modules.translatable.behavior import Translatable
from modules.translatable.config import (
    StorageStrategy,
    StrategyConfig,
    TranslatableOptions,
    resolve_config,
)
from modules.translatable.errors import (
    ConfigurationError,
    ConflictingFieldNameError,
    DataIntegrityError,
    InvalidStrategyError,
    MissingBackingFieldError,
    QueryShapeError,
    TranslatableError,
    UnavailableFieldError,
    UnavailableLocaleError,
    UnknownCanonicalLocaleError,
    UnknownTranslatedFieldError,
    UnsupportedConditionShapeError,
    UsageError,
)
from modules.translatable.mapper import compose_key, decompose_key
from modules.translatable.query import QueryRewriter, rewrite_conditions
from modules.translatable.sync import augment_missing, sync_from_map, sync_to_map, thin
from modules.translatable.validation import ValidationRelaxer, relax_rules

__all__ = [
    "Translatable",
    "StorageStrategy",
    "StrategyConfig",
    "TranslatableOptions",
    "resolve_config",
    "compose_key",
    "decompose_key",
    "sync_to_map",
    "sync_from_map",
    "augment_missing",
    "thin",
    "QueryRewriter",
    "rewrite_conditions",
    "ValidationRelaxer",
    "relax_rules",
    "TranslatableError",
    "ConfigurationError",
    "MissingBackingFieldError",
    "InvalidStrategyError",
    "UnknownCanonicalLocaleError",
    "ConflictingFieldNameError",
    "UsageError",
    "UnavailableFieldError",
    "UnavailableLocaleError",
    "DataIntegrityError",
    "UnknownTranslatedFieldError",
    "QueryShapeError",
    "UnsupportedConditionShapeError",
]
