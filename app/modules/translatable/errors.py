"""Errors for the translatable module.

All errors inherit from TranslatableError so callers can catch the whole
family at once. None of them is retried: the operations are deterministic,
so recovering means calling again with corrected configuration or input.
"""

from typing import Iterable, Optional


class TranslatableError(Exception):
    """Base exception for all translatable errors."""

    pass


class ConfigurationError(TranslatableError):
    """Raised while resolving a behavior configuration; setup must abort."""

    pass


class MissingBackingFieldError(ConfigurationError):
    """Raised when the inline strategy lacks a composed sibling field.

    Attributes:
        model: Model name.
        field: Translatable field.
        locale: Locale whose composed field is missing.
        key: The composed field name that was expected.

    Example:
        >>> resolve_config(model, {"fields": ["name"], "strategy": "inline"}, provider)
        Traceback (most recent call last):
        ...
        MissingBackingFieldError: Model `Artists` is missing translation field `i18n_name_ja` ...
    """

    def __init__(self, model: str, field: str, locale: str, key: str):
        super().__init__(
            f"Model `{model}` is missing translation field `{key}` "
            f"(field `{field}`, locale `{locale}`)"
        )
        self.model = model
        self.field = field
        self.locale = locale
        self.key = key


class InvalidStrategyError(ConfigurationError):
    """Raised when the configured storage strategy is unknown."""

    pass


class UnknownCanonicalLocaleError(ConfigurationError):
    """Raised when the canonical locale is not part of the locale set."""

    pass


class ConflictingFieldNameError(ConfigurationError):
    """Raised when a declared field name reads as a composed translation key."""

    pass


class UsageError(TranslatableError):
    """Raised when an accessor is called with arguments outside the configuration."""

    pass


class UnavailableFieldError(UsageError):
    """Raised when a field is not configured for translation.

    Attributes:
        model: Model name.
        field: Requested field.
    """

    def __init__(self, model: str, field: str):
        super().__init__(
            f"Field `{field}` in model `{model}` not available for translation."
        )
        self.model = model
        self.field = field


class UnavailableLocaleError(UsageError):
    """Raised when a locale is not configured.

    Attributes:
        model: Model name.
        field: Field the locale was requested for, if any.
        locale: Requested locale.
    """

    def __init__(self, model: str, locale: str, field: Optional[str] = None):
        target = f"field `{field}`" if field else "translations"
        super().__init__(
            f"Locale `{locale}` not setup for translation of {target} in `{model}`."
        )
        self.model = model
        self.field = field
        self.locale = locale


class DataIntegrityError(TranslatableError):
    """Raised when in-memory translation data contradicts the configuration."""

    pass


class UnknownTranslatedFieldError(DataIntegrityError):
    """Raised when a translation map references fields outside the configuration.

    Attributes:
        model: Model name.
        fields: Offending field names, sorted.
    """

    def __init__(self, model: str, fields: Iterable[str]):
        self.model = model
        self.fields = sorted(fields)
        super().__init__(
            f"Translation map of `{model}` references unconfigured field(s): "
            + ", ".join(f"`{field}`" for field in self.fields)
        )


class QueryShapeError(TranslatableError):
    """Raised when query conditions cannot be rewritten safely."""

    pass


class UnsupportedConditionShapeError(QueryShapeError):
    """Raised for translated conditions deeper than one level of qualification.

    Attributes:
        key: The offending condition key.
    """

    def __init__(self, key: str, reason: str = "nested translated conditions"):
        super().__init__(f"Unsupported condition `{key}`: {reason}")
        self.key = key
        self.reason = reason
