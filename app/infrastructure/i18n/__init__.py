"""i18n system - ambient locale configuration.

Main components:
- models: LocaleCatalog
- loader: YAMLLocaleCatalogLoader
- providers: LocaleProvider protocol, StaticLocaleProvider, SettingsLocaleProvider
"""

from infrastructure.i18n.loader import YAMLLocaleCatalogLoader
from infrastructure.i18n.models import LocaleCatalog
from infrastructure.i18n.providers import (
    LocaleProvider,
    SettingsLocaleProvider,
    StaticLocaleProvider,
)

__all__ = [
    "LocaleCatalog",
    "YAMLLocaleCatalogLoader",
    "LocaleProvider",
    "SettingsLocaleProvider",
    "StaticLocaleProvider",
]
