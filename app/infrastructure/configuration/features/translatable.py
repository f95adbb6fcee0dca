"""Translatable feature settings."""

from typing import Dict, Optional

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings


class TranslatableSettings(FeatureSettings):
    """Ambient locale configuration for translatable records.

    These values are only defaults: a model may override any of them when
    the translatable behavior is attached to it. They are read once, when a
    behavior configuration is resolved, never while records are processed.

    Environment Variables:
        TRANSLATABLE_LOCALE: Current (canonical) locale (default: "en")
        TRANSLATABLE_LOCALES: JSON object mapping locale -> label
        TRANSLATABLE_LOCALES_FILE: Optional YAML file holding the locale catalog
        TRANSLATABLE_NAMESPACE: Prefix of composed translation keys (default: "i18n")
        TRANSLATABLE_SEPARATOR: Separator used by the inline strategy (default: "_")

    Example:
        ```python
        from infrastructure.configuration import settings

        current = settings.translatable.locale
        catalog = list(settings.translatable.locales)
        ```
    """

    locale: str = Field(
        default="en",
        alias="TRANSLATABLE_LOCALE",
        description="Locale whose values live in the bare record fields",
    )
    locales: Dict[str, str] = Field(
        default_factory=lambda: {"en": "English"},
        alias="TRANSLATABLE_LOCALES",
        description="Configured locale catalog (locale -> human label)",
    )
    locales_file: Optional[str] = Field(
        default=None,
        alias="TRANSLATABLE_LOCALES_FILE",
        description="YAML file with a locale catalog, overrides TRANSLATABLE_LOCALES",
    )
    namespace: str = Field(
        default="i18n",
        alias="TRANSLATABLE_NAMESPACE",
        description="Namespace prefix for composed translation keys",
    )
    separator: str = Field(
        default="_",
        alias="TRANSLATABLE_SEPARATOR",
        description="Separator for inline (sibling field) translation keys",
    )

    @field_validator("locale", "namespace", "separator")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("value must not be blank")
        return value.strip()
