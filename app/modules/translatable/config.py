"""Behavior configuration: options, resolution and the resolved StrategyConfig."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from infrastructure.i18n import LocaleProvider, SettingsLocaleProvider
from infrastructure.logging import get_module_logger
from infrastructure.persistence import RecordModel
from modules.translatable.errors import (
    ConflictingFieldNameError,
    InvalidStrategyError,
    MissingBackingFieldError,
    UnknownCanonicalLocaleError,
)
from modules.translatable.mapper import (
    INLINE_SEPARATOR,
    NAMESPACE,
    PATH_SEPARATOR,
    compose_key,
    decompose_key,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()

LOCALE_KEY = "locale"


class StorageStrategy(str, Enum):
    """Physical layouts for translated values."""

    INLINE = "inline"
    NESTED = "nested"
    SUBRECORD = "subrecord"

    @classmethod
    def from_string(cls, value: str) -> "StorageStrategy":
        """Convert a strategy name to the enum.

        Args:
            value: Strategy name; "sub-record" and "sub_record" are accepted
                spellings of "subrecord".

        Returns:
            Matching StorageStrategy.

        Raises:
            InvalidStrategyError: If the name is unknown.
        """
        normalized = value.strip().lower().replace("-", "").replace("_", "")
        try:
            return cls(normalized)
        except ValueError as e:
            logger.error("invalid_storage_strategy", strategy=value)
            raise InvalidStrategyError(f"Unknown storage strategy: {value}") from e


class TranslatableOptions(BaseModel):
    """Per-model options, every one of them optional.

    ``default`` is accepted as another name for ``locale``.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    locale: Optional[str] = Field(default=None, alias="default")
    locales: List[str] = Field(default_factory=list)
    fields: List[str] = Field(default_factory=list)
    strategy: Optional[str] = None
    namespace: Optional[str] = None
    separator: Optional[str] = None


@dataclass(frozen=True)
class StrategyConfig:
    """Resolved and validated configuration. Pure data.

    Attributes:
        model: Name of the model the configuration belongs to.
        locale: Canonical locale; its values live in the bare fields.
        locales: Every configured locale, canonical included.
        fields: Translatable field names.
        strategy: Storage strategy.
        namespace: Namespace of composed keys and of the translation map slot.
        separator: Separator of inline sibling field names.
    """

    model: str
    locale: str
    locales: Tuple[str, ...]
    fields: Tuple[str, ...]
    strategy: StorageStrategy
    namespace: str = NAMESPACE
    separator: str = INLINE_SEPARATOR

    @property
    def translated_locales(self) -> Tuple[str, ...]:
        """Configured locales other than the canonical one."""
        return tuple(locale for locale in self.locales if locale != self.locale)

    def is_canonical(self, locale: str) -> bool:
        return locale == self.locale

    def inline_key(self, field: str, locale: str) -> str:
        """Sibling field name holding a field's value in a locale."""
        return compose_key(field, locale, self.separator, self.namespace)

    def path_key(self, field: str, locale: str) -> str:
        """Dotted path to a field's value in a locale inside the translation map."""
        return compose_key(field, locale, PATH_SEPARATOR, self.namespace)


def _unique(values: List[str]) -> Tuple[str, ...]:
    seen: Dict[str, None] = {}
    for value in values:
        if value:
            seen.setdefault(value, None)
    return tuple(seen)


def _check_field_names(
    model: str, fields: Tuple[str, ...], locales: Tuple[str, ...], namespace: str, separator: str
) -> None:
    reserved = {namespace, LOCALE_KEY, *locales}
    for field in fields:
        if PATH_SEPARATOR in field or field in reserved:
            logger.error("conflicting_field_name", model=model, field=field)
            raise ConflictingFieldNameError(
                f"Field `{field}` of model `{model}` clashes with translation key syntax"
            )
        clash = decompose_key(field, separator, namespace, locales)
        if clash is None:
            clash = decompose_key(field, PATH_SEPARATOR, namespace, locales)
        if clash is not None:
            logger.error("conflicting_field_name", model=model, field=field)
            raise ConflictingFieldNameError(
                f"Field `{field}` of model `{model}` reads as the translation key "
                f"of field `{clash[0]}` in locale `{clash[1]}`"
            )


def resolve_config(
    model: RecordModel,
    options: Union[TranslatableOptions, Mapping[str, Any], None] = None,
    provider: Optional[LocaleProvider] = None,
    settings: Optional["Settings"] = None,
) -> StrategyConfig:
    """Resolve behavior options against the ambient configuration.

    Resolution order: the canonical locale defaults to the provider's current
    locale, the locale set to the provider's catalog, and the strategy to
    "nested" when the store holds structured values natively ("inline"
    otherwise). For the inline strategy every composed sibling field must
    exist on the model; this is checked here, once.

    Args:
        model: Model the behavior is attached to.
        options: Partial options.
        provider: Ambient locale provider (default: SettingsLocaleProvider).
        settings: Settings used for namespace/separator defaults.

    Returns:
        The resolved StrategyConfig.

    Raises:
        MissingBackingFieldError: If an inline sibling field is missing.
        InvalidStrategyError: If the strategy name is unknown.
        UnknownCanonicalLocaleError: If the canonical locale is not configured.
        ConflictingFieldNameError: If a field name reads as a composed key.
    """
    if isinstance(options, TranslatableOptions):
        opts = options
    else:
        opts = TranslatableOptions.model_validate(dict(options or {}))

    if settings is None:
        from infrastructure.configuration import settings as default_settings

        settings = default_settings
    if provider is None:
        provider = SettingsLocaleProvider(settings)

    namespace = opts.namespace or settings.translatable.namespace
    separator = opts.separator or settings.translatable.separator
    locale = opts.locale or provider.current_locale()
    locales = _unique(opts.locales or list(provider.locale_catalog()))
    fields = _unique(opts.fields)

    if locale not in locales:
        logger.error(
            "unknown_canonical_locale", model=model.name, locale=locale, locales=list(locales)
        )
        raise UnknownCanonicalLocaleError(
            f"Canonical locale `{locale}` of model `{model.name}` is not one of "
            f"the configured locales: {', '.join(locales)}"
        )

    if opts.strategy:
        strategy = StorageStrategy.from_string(opts.strategy)
    else:
        strategy = (
            StorageStrategy.NESTED if model.supports_arrays else StorageStrategy.INLINE
        )

    _check_field_names(model.name, fields, locales, namespace, separator)

    config = StrategyConfig(
        model=model.name,
        locale=locale,
        locales=locales,
        fields=fields,
        strategy=strategy,
        namespace=namespace,
        separator=separator,
    )

    if strategy is StorageStrategy.INLINE:
        for field in fields:
            for translated in config.translated_locales:
                key = config.inline_key(field, translated)
                if not model.has_field(key):
                    logger.error(
                        "missing_backing_field",
                        model=model.name,
                        field=field,
                        locale=translated,
                        key=key,
                    )
                    raise MissingBackingFieldError(model.name, field, translated, key)

    logger.info(
        "translatable_config_resolved",
        model=model.name,
        locale=locale,
        locales=list(locales),
        fields=list(fields),
        strategy=strategy.value,
    )
    return config
