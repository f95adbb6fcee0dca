"""Synchronization between physical layouts and the translation map.

The translation map is the in-memory view ``{field: {locale: value}}`` kept
under the namespace key of a record. The functions here are pure with
respect to the store: they only read and mutate the records they are given.
"""

import copy
from typing import Iterable, Optional, Set

from infrastructure.logging import get_module_logger
from infrastructure.persistence import Record
from modules.translatable.config import LOCALE_KEY, StrategyConfig
from modules.translatable.errors import DataIntegrityError, UnknownTranslatedFieldError
from modules.translatable.mapper import parse_qualified_key
from modules.translatable.strategies import StorageLayout, TranslationMap, layout_for

logger = get_module_logger()


def get_translations(record: Record, config: StrategyConfig) -> TranslationMap:
    """Copy of the record's translation map; empty when there is none.

    Raises:
        DataIntegrityError: If the map slot holds something other than
            ``{field: {locale: value}}``.
    """
    slot = record.get(config.namespace)
    if slot is None:
        return {}
    if not isinstance(slot, dict) or not all(
        isinstance(per_locale, dict) for per_locale in slot.values()
    ):
        logger.warning("malformed_translation_map", model=config.model)
        raise DataIntegrityError(
            f"Translation map of model `{config.model}` must map fields to "
            f"{{locale: value}} mappings"
        )
    return copy.deepcopy(slot)


def pseudo_field_keys(record: Record, config: StrategyConfig) -> Iterable[str]:
    """Keys of the record that address a field in a locale.

    These are flat keys like ``it.name`` or ``i18n.name.it``, and locale keys
    holding a mapping of translatable fields (``{"it": {"name": ...}}``).
    """
    for key in record.keys():
        if parse_qualified_key(key, config.fields, config.locales, config.namespace):
            yield key
        elif key in config.locales:
            value = record.get(key)
            if isinstance(value, dict) and value and set(value) <= set(config.fields):
                yield key


def has_translation_input(record: Record, config: StrategyConfig) -> bool:
    """Whether the record carries a non-empty map or pseudo-fields."""
    if record.get(config.namespace):
        return True
    return any(True for _ in pseudo_field_keys(record, config))


def absorb_pseudo_fields(
    record: Record, translations: TranslationMap, config: StrategyConfig
) -> TranslationMap:
    """Move pseudo-field values into the map and drop the pseudo-fields.

    A pseudo-field addressing the canonical locale is written to the bare
    field instead.
    """
    for key in list(pseudo_field_keys(record, config)):
        value = record.get(key)
        record.unset(key)

        parsed = parse_qualified_key(key, config.fields, config.locales, config.namespace)
        if parsed is not None:
            assignments = {parsed[0]: value}
            locale = parsed[1]
        else:
            assignments = value
            locale = key

        for field, item in assignments.items():
            if config.is_canonical(locale):
                record.set(field, item)
            else:
                translations.setdefault(field, {})[locale] = item
    return translations


def align_canonical(
    record: Record, translations: TranslationMap, config: StrategyConfig
) -> TranslationMap:
    """Make the bare fields and the canonical map entries agree.

    A bare field present on the record is authoritative; otherwise a
    canonical map entry fills the missing field.
    """
    for field in config.fields:
        if record.has(field):
            translations.setdefault(field, {})[config.locale] = record.get(field)
        else:
            per_locale = translations.get(field)
            if per_locale is not None and config.locale in per_locale:
                record.set(field, per_locale[config.locale])
    return translations


def sync_to_map(
    record: Record, config: StrategyConfig, layout: Optional[StorageLayout] = None
) -> TranslationMap:
    """Build a full translation map from a record's physical layout.

    Args:
        record: Record in physical form.
        config: Resolved configuration.
        layout: Layout to read with (default: the configuration's).

    Returns:
        ``{field: {locale: value}}`` for every configured field and locale,
        None where no value is stored. The record is not modified.
    """
    layout = layout or layout_for(config)
    return {
        field: {locale: layout.read(record, field, locale) for locale in config.locales}
        for field in config.fields
    }


def sync_from_map(
    record: Record, config: StrategyConfig, layout: Optional[StorageLayout] = None
) -> Record:
    """Propagate translation map state into the record's fields.

    Pseudo-fields are absorbed into the map, the bare fields and the
    canonical entries are aligned, and layouts that keep physical fields
    beside the map (inline) get them refreshed.

    Args:
        record: Record to update in place.
        config: Resolved configuration.
        layout: Layout to mirror with (default: the configuration's).

    Returns:
        The same record.
    """
    layout = layout or layout_for(config)
    translations = get_translations(record, config)
    absorb_pseudo_fields(record, translations, config)
    align_canonical(record, translations, config)
    record.set(config.namespace, translations)
    layout.mirror(record, translations)
    return record


def augment_missing(
    authoritative: Record, target: Record, config: StrategyConfig
) -> Record:
    """Fill gaps in the target's map from the authoritative record's map.

    A (field, locale) entry counts as a gap when it is absent or None. Gaps
    take the authoritative value, or None if the authoritative record has
    none either, so the result covers every configured field and locale.
    Values the target already holds are never overwritten.

    Args:
        authoritative: Record whose map is the source of truth.
        target: Record to complete in place; may be the same record.
        config: Resolved configuration.

    Returns:
        The target record.
    """
    source = get_translations(authoritative, config)
    translations = get_translations(target, config)

    for field in config.fields:
        per_locale = translations.setdefault(field, {})
        known = source.get(field, {})
        for locale in config.locales:
            if per_locale.get(locale) is None:
                per_locale[locale] = known.get(locale)

    target.set(config.namespace, translations)
    return target


def thin(
    record: Record, fields: Iterable[str], locale: str, namespace: str
) -> Record:
    """Prepare a map for storage.

    The canonical entry of each field is promoted into the bare field and
    removed from the map; a field whose map ends up empty is dropped.
    Applying it twice gives the same result as applying it once.

    Args:
        record: Record to update in place.
        fields: Translatable fields.
        locale: Canonical locale.
        namespace: Map slot key.

    Returns:
        The same record.
    """
    translations = copy.deepcopy(record.get(namespace) or {})
    for field in fields:
        per_locale = translations.get(field)
        if per_locale is None:
            continue
        if locale in per_locale:
            record.set(field, per_locale.pop(locale))
        if not per_locale:
            del translations[field]
    record.set(namespace, translations)
    return record


def unknown_fields(record: Record, config: StrategyConfig) -> Set[str]:
    return set(get_translations(record, config)) - set(config.fields)


def check_known_fields(record: Record, config: StrategyConfig) -> None:
    """Raise if the map names fields that are not translatable.

    Raises:
        UnknownTranslatedFieldError: With the offending field names.
    """
    unknown = unknown_fields(record, config)
    if unknown:
        logger.warning(
            "unknown_translated_field", model=config.model, fields=sorted(unknown)
        )
        raise UnknownTranslatedFieldError(config.model, unknown)


def format_record(
    record: Record, config: StrategyConfig, layout: Optional[StorageLayout] = None
) -> Record:
    """Turn a physical record into its read view, in place.

    The record ends up with canonical values in the bare fields, a complete
    translation map under the namespace, and no other physical traces of
    translated values.
    """
    layout = layout or layout_for(config)
    translations = sync_to_map(record, config, layout)
    layout.detach(record, translations)
    record.set(config.namespace, translations)
    return augment_missing(record, record, config)


def collapse(record: Record, locale: str, config: StrategyConfig) -> Record:
    """Single-locale view of a formatted record.

    Args:
        record: Formatted record; left unchanged.
        locale: Locale whose values replace the bare field values.
        config: Resolved configuration.

    Returns:
        A clone whose translatable fields hold the locale's values, with no
        translation map and with ``locale`` naming the collapsed locale.
    """
    translations = get_translations(record, config)
    view = record.clone()
    for field in config.fields:
        view.set(field, translations.get(field, {}).get(locale))
    view.unset(config.namespace)
    view.set(LOCALE_KEY, locale)
    return view

