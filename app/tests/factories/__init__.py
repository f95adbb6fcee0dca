"""Test data factories for deterministic test data generation."""

from tests.factories.translatable import (
    ARTIST_LOCALES,
    ARTIST_RULES,
    make_artists_model,
    make_config,
    make_entity,
    make_inline_schema,
    make_provider,
    make_translatable,
)

__all__ = [
    "ARTIST_LOCALES",
    "ARTIST_RULES",
    "make_artists_model",
    "make_config",
    "make_entity",
    "make_inline_schema",
    "make_provider",
    "make_translatable",
]
