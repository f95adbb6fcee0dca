"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.translatable import TranslatableSettings

__all__ = [
    "TranslatableSettings",
]
