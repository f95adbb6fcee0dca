"""Translatable behavior: lifecycle hooks and translation accessors.

Attaching the behavior to a model resolves its configuration once and
registers handlers around the model's create, save, find and validates
operations. Records read through the model carry canonical values in their
bare fields and every translation in a map under the namespace key
(``i18n`` by default):

    artists = MemoryModel("Artists", rules={...})
    translatable = Translatable(artists, {
        "fields": ["name", "profile"],
        "locales": ["en", "it", "ja"],
        "locale": "ja",
    })

    artist = artists.create({"ja.name": "リチャード", "en.name": "Richard"})
    artists.save(artist)
    artists.first(conditions={"en.name": "Richard"})
"""

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

from infrastructure.i18n import LocaleProvider
from infrastructure.logging import bind_request_context, get_module_logger
from infrastructure.persistence import Chain, Record, RecordModel
from modules.translatable.config import (
    LOCALE_KEY,
    StrategyConfig,
    TranslatableOptions,
    resolve_config,
)
from modules.translatable.errors import UnavailableFieldError, UnavailableLocaleError
from modules.translatable.query import QueryRewriter
from modules.translatable.strategies import TranslationMap, layout_for
from modules.translatable.sync import (
    absorb_pseudo_fields,
    align_canonical,
    augment_missing,
    check_known_fields,
    collapse,
    format_record,
    get_translations,
    has_translation_input,
    sync_from_map,
    sync_to_map,
    thin,
)
from modules.translatable.validation import ValidationRelaxer

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()

_UNSET = object()


class Translatable:
    """Per-model translation behavior.

    Saving an existing record under the nested or subrecord strategy reads
    the persisted record and merges its translations before writing. The
    read and the write are not atomic: two concurrent saves of the same
    record may each merge a stale copy, and the later write drops the other
    one's translations. Callers needing stronger guarantees must serialize
    saves per record or rely on the store's own concurrency control.

    Attributes:
        model: The model the behavior is attached to.
        config: Resolved configuration.
    """

    def __init__(
        self,
        model: RecordModel,
        options: Union[TranslatableOptions, Mapping[str, Any], None] = None,
        provider: Optional[LocaleProvider] = None,
        settings: Optional["Settings"] = None,
    ):
        """Resolve the configuration and register lifecycle hooks.

        Args:
            model: Model to attach to.
            options: Behavior options (fields, locales, locale, strategy, ...).
            provider: Ambient locale provider.
            settings: Settings used for defaults.

        Raises:
            ConfigurationError: If the configuration cannot be resolved; no
                hooks are registered in that case.
        """
        self.model = model
        self.config: StrategyConfig = resolve_config(model, options, provider, settings)
        self.layout = layout_for(self.config)
        self.rewriter = QueryRewriter(self.config)
        self.relaxer = ValidationRelaxer(self.config)

        model.apply_filter("create", self._on_create)
        model.apply_filter("save", self._on_save)
        model.apply_filter("find", self._on_find)
        model.apply_filter("validates", self._on_validates)

    # Accessors

    def translate(
        self,
        entity: Record,
        field: str,
        locale: Optional[str] = None,
        value: Any = _UNSET,
    ) -> Any:
        """Read or write translations of one field.

        Args:
            entity: Record in read form.
            field: Translatable field.
            locale: Locale to read or write; None reads every locale.
            value: Value to store for the locale.

        Returns:
            Without a locale, a ``{locale: value}`` copy including the
            canonical value. With a locale, that locale's value; the bare
            field answers for the canonical locale when the map has nothing.
            When writing, the value written.

        Raises:
            UnavailableFieldError: If the field is not translatable.
            UnavailableLocaleError: If the locale is not configured.
        """
        self._check_field(field)
        if locale is not None:
            self._check_locale(locale, field)

        translations = get_translations(entity, self.config)
        per_locale = translations.get(field, {})

        if value is not _UNSET:
            if locale is None:
                raise TypeError("translate() needs a locale to write a value")
            per_locale[locale] = value
            translations[field] = per_locale
            entity.set(self.config.namespace, translations)
            if self.config.is_canonical(locale):
                entity.set(field, value)
            sync_from_map(entity, self.config, self.layout)
            return value

        if locale is None:
            return {**per_locale, self.config.locale: entity.get(field)}
        if per_locale.get(locale) is not None:
            return per_locale[locale]
        if self.config.is_canonical(locale):
            return entity.get(field)
        return None

    def is_translated(self, entity: Record, field: str) -> bool:
        """Whether the field has a non-empty value in any non-canonical locale.

        Raises:
            UnavailableFieldError: If the field is not translatable.
        """
        self._check_field(field)
        per_locale = get_translations(entity, self.config).get(field, {})
        return any(
            value not in (None, "")
            for locale, value in per_locale.items()
            if not self.config.is_canonical(locale)
        )

    def format(self, entity: Record, locale: Optional[str] = None) -> Record:
        """Turn a physical record into its read view.

        Args:
            entity: Record as returned by the store; updated in place.
            locale: Collapse the view to this locale.

        Returns:
            The formatted record, or a collapsed clone of it.
        """
        format_record(entity, self.config, self.layout)
        if locale is not None:
            return collapse(entity, locale, self.config)
        return entity

    # Hooks

    def _on_create(self, params: Dict[str, Any], chain: Chain) -> Record:
        with bind_request_context(model=self.model.name, operation="create"):
            entity = chain.next(params)
            translations = sync_to_map(entity, self.config, self.layout)
            self.layout.detach(entity, translations)
            translations = self._merge_slot(entity, translations)
            absorb_pseudo_fields(entity, translations, self.config)
            align_canonical(entity, translations, self.config)
            entity.set(self.config.namespace, translations)
            return augment_missing(entity, entity, self.config)

    def _on_save(self, params: Dict[str, Any], chain: Chain) -> Any:
        entity: Record = params["entity"]
        with bind_request_context(model=self.model.name, operation="save"):
            if params.get("data"):
                entity.set(params["data"])
                params = {**params, "data": None}
            self._apply_locale_marker(entity)
            self.layout.lift(entity)

            if not has_translation_input(entity, self.config):
                return chain.next(params)

            sync_from_map(entity, self.config, self.layout)
            check_known_fields(entity, self.config)

            options = dict(params.get("options") or {})
            if options.get("validate", True):
                if not self.model.validates(entity, rules=options.get("rules")):
                    logger.info("translated_save_rejected", errors=sorted(entity.errors))
                    return False
                options["validate"] = False

            if entity.exists() and self.layout.merge_on_write:
                persisted = self._fetch_persisted(entity)
                if persisted is not None:
                    augment_missing(persisted, entity, self.config)

            thin(entity, self.config.fields, self.config.locale, self.config.namespace)
            self.layout.attach(entity, entity.get(self.config.namespace) or {})
            logger.debug("translations_written", strategy=self.config.strategy.value)
            return chain.next({**params, "options": options})

    def _on_find(self, params: Dict[str, Any], chain: Chain) -> Any:
        options = dict(params.get("options") or {})
        translate = options.pop("translate", True)
        if translate is False or options.pop("ignore_locale", False):
            return chain.next({**params, "options": options})

        with bind_request_context(model=self.model.name, operation="find"):
            locale = options.pop(LOCALE_KEY, None)
            target = translate if isinstance(translate, str) else None
            if target is not None:
                self._check_locale(target)
            if options.get("conditions"):
                options["conditions"] = self.rewriter.rewrite(
                    options["conditions"], locale=locale
                )
            elif locale is not None:
                self._check_locale(locale)

            result = chain.next({**params, "options": options})
            if params.get("type") == "count" or result is None:
                return result
            if isinstance(result, list):
                return [self.format(record, target) for record in result]
            return self.format(result, target)

    def _on_validates(self, params: Dict[str, Any], chain: Chain) -> bool:
        entity: Record = params["entity"]
        if not has_translation_input(entity, self.config):
            return chain.next(params)

        with bind_request_context(model=self.model.name, operation="validates"):
            working = entity.clone()
            sync_from_map(working, self.config, self.layout)
            check_known_fields(working, self.config)

            options = dict(params.get("options") or {})
            rules = options.get("rules")
            if rules is None:
                rules = self.model.rules
            relaxed = self.relaxer.relax(rules)
            if working.exists():
                # Partial update: absent canonical values stay as persisted.
                for field in self.config.fields:
                    if not working.has(field):
                        relaxed.pop(field, None)
            options["rules"] = relaxed

            valid = chain.next({**params, "entity": working, "options": options})
            entity.errors = dict(working.errors)
            return valid

    # Internals

    def _merge_slot(self, entity: Record, translations: TranslationMap) -> TranslationMap:
        """Overlay map entries given on input onto the map read from the layout."""
        given = get_translations(entity, self.config)
        for field, per_locale in given.items():
            translations.setdefault(field, {}).update(per_locale)
        return translations

    def _apply_locale_marker(self, entity: Record) -> None:
        """Route bare field values of a collapsed record back to their locale."""
        locale = entity.get(LOCALE_KEY)
        if locale is None:
            return
        entity.unset(LOCALE_KEY)
        self._check_locale(locale)
        if self.config.is_canonical(locale):
            return

        translations = get_translations(entity, self.config)
        for field in self.config.fields:
            if entity.has(field):
                translations.setdefault(field, {})[locale] = entity.get(field)
                entity.unset(field)
        entity.set(self.config.namespace, translations)
        logger.debug("collapsed_record_expanded", locale=locale)

    def _fetch_persisted(self, entity: Record) -> Optional[Record]:
        """Persisted copy of the record with its full map; not locked until the write."""
        key = self.model.key()
        identity = entity.get(key)
        if identity is None:
            return None
        persisted = self.model.find(
            "first", conditions={key: identity}, ignore_locale=True
        )
        if persisted is None:
            logger.warning("persisted_record_missing", key=identity)
            return None
        persisted.set(
            self.config.namespace, sync_to_map(persisted, self.config, self.layout)
        )
        logger.debug("merge_on_write_fetched", key=identity)
        return persisted

    def _check_field(self, field: str) -> None:
        if field not in self.config.fields:
            raise UnavailableFieldError(self.config.model, field)

    def _check_locale(self, locale: str, field: Optional[str] = None) -> None:
        if locale not in self.config.locales:
            raise UnavailableLocaleError(self.config.model, locale, field)
