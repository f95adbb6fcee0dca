"""Ambient locale providers.

A provider answers two questions: which locale is current, and which locales
are configured. Config resolution receives a provider instead of reaching for
process-wide settings, so any locale set can be used without touching global
state.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional, Protocol, runtime_checkable

from infrastructure.i18n.loader import YAMLLocaleCatalogLoader
from infrastructure.i18n.models import LocaleCatalog

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


@runtime_checkable
class LocaleProvider(Protocol):
    """Protocol for ambient locale configuration lookups."""

    def current_locale(self) -> str:  # pragma: no cover - typing helper
        ...

    def locale_catalog(self) -> Dict[str, str]:  # pragma: no cover - typing helper
        ...


class StaticLocaleProvider:
    """Provider serving a fixed catalog."""

    def __init__(self, catalog: LocaleCatalog):
        self.catalog = catalog

    @classmethod
    def of(cls, current: str, *locales: str) -> "StaticLocaleProvider":
        """Shorthand building a provider from locale codes.

        Args:
            current: Current locale.
            *locales: Configured locales (labels default to the code).

        Returns:
            StaticLocaleProvider instance.
        """
        labels = {locale: locale for locale in locales}
        return cls(LocaleCatalog.from_mapping(current, labels))

    def current_locale(self) -> str:
        return self.catalog.current

    def locale_catalog(self) -> Dict[str, str]:
        return dict(self.catalog.labels)


class SettingsLocaleProvider:
    """Provider backed by TranslatableSettings.

    When TRANSLATABLE_LOCALES_FILE is set the YAML catalog wins over the
    TRANSLATABLE_LOCALES mapping; TRANSLATABLE_LOCALE still names the current
    locale.
    """

    def __init__(self, settings: Optional["Settings"] = None):
        """Initialize the provider.

        Args:
            settings: Settings instance. Defaults to the singleton.
        """
        if settings is None:
            from infrastructure.configuration import settings as default_settings

            settings = default_settings
        self._settings = settings
        self._loader: Optional[YAMLLocaleCatalogLoader] = None
        if settings.translatable.locales_file:
            self._loader = YAMLLocaleCatalogLoader(
                Path(settings.translatable.locales_file)
            )

    def current_locale(self) -> str:
        return self._settings.translatable.locale

    def locale_catalog(self) -> Dict[str, str]:
        if self._loader is not None:
            return dict(self._loader.load().labels)
        return dict(self._settings.translatable.locales)
