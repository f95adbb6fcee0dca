"""Test data factories for translatable records.

Provides deterministic builders for:
- Locale providers
- Artists models for each storage strategy
- Resolved StrategyConfig instances
- Entities in physical or read form
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from infrastructure.i18n import StaticLocaleProvider
from infrastructure.persistence import Entity, MemoryModel
from modules.translatable import StorageStrategy, StrategyConfig, Translatable

ARTIST_LOCALES = ("en", "it", "ja")
ARTIST_FIELDS = ("name", "profile")

ARTIST_RULES: Dict[str, List[Dict[str, Any]]] = {
    "name": [
        {"rule": "notEmpty", "message": "Artist name can't be empty."},
        {
            "rule": "lengthBetween",
            "min": 4,
            "max": 20,
            "message": "Must have between 4 and 20 chars.",
        },
    ],
}


def make_provider(
    current: str = "ja", locales: Sequence[str] = ARTIST_LOCALES
) -> StaticLocaleProvider:
    """Create a StaticLocaleProvider.

    Args:
        current: Current locale.
        locales: Configured locales.

    Returns:
        StaticLocaleProvider instance.
    """
    return StaticLocaleProvider.of(current, *locales)


def make_inline_schema(
    fields: Iterable[str] = ARTIST_FIELDS,
    locales: Iterable[str] = ("en", "it"),
    extra: Iterable[str] = ("_id",),
) -> List[str]:
    """Field names of a flat table holding sibling translation columns."""
    schema = list(extra) + list(fields)
    for field in fields:
        schema.extend(f"i18n_{field}_{locale}" for locale in locales)
    return schema


def make_artists_model(
    strategy: Optional[str] = None,
    rules: Optional[Dict[str, List[Dict[str, Any]]]] = None,
) -> MemoryModel:
    """Create an Artists model suited to a storage strategy.

    The inline strategy gets a flat store with a fixed schema; the others a
    schemaless store holding structured values.
    """
    rules = ARTIST_RULES if rules is None else rules
    if strategy == "inline":
        return MemoryModel(
            "Artists",
            schema=make_inline_schema(),
            supports_arrays=False,
            rules=rules,
        )
    return MemoryModel("Artists", rules=rules)


def make_translatable(
    model: MemoryModel,
    strategy: Optional[str] = None,
    fields: Sequence[str] = ARTIST_FIELDS,
    locale: str = "ja",
    locales: Sequence[str] = ARTIST_LOCALES,
) -> Translatable:
    """Attach the translatable behavior with the Artists defaults."""
    options: Dict[str, Any] = {"fields": list(fields), "locales": list(locales), "locale": locale}
    if strategy is not None:
        options["strategy"] = strategy
    return Translatable(model, options, provider=make_provider(locale, locales))


def make_config(
    strategy: StorageStrategy = StorageStrategy.NESTED,
    fields: Sequence[str] = ARTIST_FIELDS,
    locale: str = "ja",
    locales: Sequence[str] = ARTIST_LOCALES,
) -> StrategyConfig:
    """Create a resolved StrategyConfig without going through resolution."""
    return StrategyConfig(
        model="Artists",
        locale=locale,
        locales=tuple(locales),
        fields=tuple(fields),
        strategy=strategy,
    )


def make_entity(data: Optional[Dict[str, Any]] = None, exists: bool = False) -> Entity:
    """Create a detached Entity."""
    return Entity(data or {}, exists=exists)
