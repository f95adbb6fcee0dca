"""Locale catalog models for the i18n system.

Locales are opaque identifiers (short codes such as "en" or "ja"); the
catalog only records which ones are configured and which one is current.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class LocaleCatalog:
    """Configured locales and the current locale.

    Frozen so a resolved catalog can be shared between model configurations
    without any of them mutating process-wide state.

    Attributes:
        current: The current (canonical) locale.
        labels: Mapping of locale -> human readable label, in catalog order.
    """

    current: str
    labels: Dict[str, str] = field(default_factory=dict)

    @property
    def locales(self) -> Tuple[str, ...]:
        """Configured locales in catalog order.

        Returns:
            Tuple of locale identifiers.
        """
        return tuple(self.labels.keys())

    def has_locale(self, locale: str) -> bool:
        """Check if a locale is part of the catalog.

        Args:
            locale: Locale identifier.

        Returns:
            True if configured, False otherwise.
        """
        return locale in self.labels

    def label(self, locale: str) -> Optional[str]:
        """Get the human readable label of a locale.

        Args:
            locale: Locale identifier.

        Returns:
            Label, or None if the locale is not configured.
        """
        return self.labels.get(locale)

    @classmethod
    def from_mapping(cls, current: str, labels: Dict[str, str]) -> "LocaleCatalog":
        """Build a catalog, making sure the current locale is listed.

        Args:
            current: Current locale.
            labels: Locale -> label mapping.

        Returns:
            LocaleCatalog instance.
        """
        merged = dict(labels)
        if current not in merged:
            merged[current] = current
        return cls(current=current, labels=merged)
