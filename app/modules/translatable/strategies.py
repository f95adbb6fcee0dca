"""Physical storage layouts for translated values.

Every layout answers the same three questions for a record: what value does
a field hold in a locale (``read``), how are physical traces removed once a
translation map has been built from them (``detach``), and how is a thinned
translation map written back into physical form (``attach``).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from infrastructure.persistence import Record
from modules.translatable.config import LOCALE_KEY, StorageStrategy, StrategyConfig

TranslationMap = Dict[str, Dict[str, Any]]

LOCALIZATIONS_KEY = "localizations"
VALIDATION_LOCALE_KEY = "validation_locale"


class StorageLayout(ABC):
    """Base class for storage layouts.

    Attributes:
        strategy: Strategy the layout implements.
        merge_on_write: Whether a save must merge the persisted translations
            in first, because the store replaces the structured value wholesale.
    """

    strategy: StorageStrategy
    merge_on_write = False

    def __init__(self, config: StrategyConfig):
        self.config = config

    def read(self, record: Record, field: str, locale: str) -> Any:
        """Physical value of a field in a locale, None when absent."""
        if self.config.is_canonical(locale):
            return record.get(field)
        return self._read_translation(record, field, locale)

    @abstractmethod
    def _read_translation(self, record: Record, field: str, locale: str) -> Any:
        ...

    def detach(self, record: Record, translations: TranslationMap) -> None:
        """Remove physical traces that the translation map now represents."""

    def mirror(self, record: Record, translations: TranslationMap) -> None:
        """Reflect map entries into physical fields kept beside the map."""

    def lift(self, record: Record) -> None:
        """Move the translations of a raw record into a map, if the layout needs it."""

    @abstractmethod
    def attach(self, record: Record, translations: TranslationMap) -> None:
        """Write a thinned translation map into physical form."""


class InlineLayout(StorageLayout):
    """Sibling fields ``<namespace><sep><field><sep><locale>`` per translated locale."""

    strategy = StorageStrategy.INLINE

    def _read_translation(self, record: Record, field: str, locale: str) -> Any:
        return record.get(self.config.inline_key(field, locale))

    def detach(self, record: Record, translations: TranslationMap) -> None:
        for field in self.config.fields:
            for locale in self.config.translated_locales:
                record.unset(self.config.inline_key(field, locale))

    def mirror(self, record: Record, translations: TranslationMap) -> None:
        for field, per_locale in translations.items():
            if field not in self.config.fields:
                continue
            for locale, value in per_locale.items():
                if locale in self.config.translated_locales:
                    record.set(self.config.inline_key(field, locale), value)

    def attach(self, record: Record, translations: TranslationMap) -> None:
        self.mirror(record, translations)
        record.unset(self.config.namespace)


class NestedLayout(StorageLayout):
    """A single structured value ``{field: {locale: value}}`` under the namespace."""

    strategy = StorageStrategy.NESTED
    merge_on_write = True

    def _read_translation(self, record: Record, field: str, locale: str) -> Any:
        slot = record.get(self.config.namespace)
        if not isinstance(slot, dict):
            return None
        per_locale = slot.get(field)
        if not isinstance(per_locale, dict):
            return None
        return per_locale.get(locale)

    def attach(self, record: Record, translations: TranslationMap) -> None:
        record.set(self.config.namespace, translations)


class SubRecordLayout(StorageLayout):
    """A list of locale-tagged sub-records under ``localizations``.

    Each sub-record is ``{"locale": <locale>, <field>: <value>, ...}``; the
    canonical locale has one too. ``validation_locale`` names the sub-record
    whose values the top-level fields currently hold.
    """

    strategy = StorageStrategy.SUBRECORD
    merge_on_write = True

    def read(self, record: Record, field: str, locale: str) -> Any:
        if self.config.is_canonical(locale) and self._backed_by_canonical(record):
            return record.get(field)
        return self._read_translation(record, field, locale)

    def _read_translation(self, record: Record, field: str, locale: str) -> Any:
        sub_record = self._find(record, locale)
        return sub_record.get(field) if sub_record is not None else None

    def detach(self, record: Record, translations: TranslationMap) -> None:
        for field in self.config.fields:
            record.set(field, translations.get(field, {}).get(self.config.locale))
        record.unset(LOCALIZATIONS_KEY)

    def lift(self, record: Record) -> None:
        if record.get(self.config.namespace) or not isinstance(
            record.get(LOCALIZATIONS_KEY), list
        ):
            return
        translations = {
            field: {
                locale: self._read_translation(record, field, locale)
                for locale in self.config.translated_locales
            }
            for field in self.config.fields
        }
        if not self._backed_by_canonical(record):
            for field in self.config.fields:
                value = self._read_translation(record, field, self.config.locale)
                if value is None:
                    record.unset(field)
                else:
                    record.set(field, value)
        record.unset(LOCALIZATIONS_KEY)
        record.set(self.config.namespace, translations)

    def attach(self, record: Record, translations: TranslationMap) -> None:
        sub_records: List[Dict[str, Any]] = []
        canonical = {
            field: record.get(field) for field in self.config.fields if record.has(field)
        }
        if self._has_values(canonical):
            sub_records.append({LOCALE_KEY: self.config.locale, **canonical})

        for locale in self.config.translated_locales:
            values = {
                field: per_locale[locale]
                for field, per_locale in translations.items()
                if locale in per_locale
            }
            if self._has_values(values):
                sub_records.append({LOCALE_KEY: locale, **values})

        backing: Optional[Dict[str, Any]] = sub_records[0] if sub_records else None
        if backing is not None and backing[LOCALE_KEY] != self.config.locale:
            for field in self.config.fields:
                record.set(field, backing.get(field))

        record.set(LOCALIZATIONS_KEY, sub_records)
        record.set(
            VALIDATION_LOCALE_KEY,
            backing[LOCALE_KEY] if backing is not None else self.config.locale,
        )
        record.unset(self.config.namespace)

    def _find(self, record: Record, locale: str) -> Optional[Dict[str, Any]]:
        sub_records = record.get(LOCALIZATIONS_KEY)
        if not isinstance(sub_records, list):
            return None
        for sub_record in sub_records:
            if isinstance(sub_record, dict) and sub_record.get(LOCALE_KEY) == locale:
                return sub_record
        return None

    def _backed_by_canonical(self, record: Record) -> bool:
        backing = record.get(VALIDATION_LOCALE_KEY) or self.config.locale
        return backing == self.config.locale

    @staticmethod
    def _has_values(values: Dict[str, Any]) -> bool:
        return any(value is not None for value in values.values())


_LAYOUTS = {
    StorageStrategy.INLINE: InlineLayout,
    StorageStrategy.NESTED: NestedLayout,
    StorageStrategy.SUBRECORD: SubRecordLayout,
}


def layout_for(config: StrategyConfig) -> StorageLayout:
    """Build the layout for a resolved configuration."""
    return _LAYOUTS[config.strategy](config)
