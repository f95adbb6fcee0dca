"""Mapping between (field, locale) pairs and their storage keys.

Composed keys follow one fixed rule: namespace, separator, field, separator,
locale. With the defaults that gives ``i18n_name_ja`` for inline sibling
fields and ``i18n.name.ja`` for dotted paths into a translation map.
"""

from typing import Iterable, Optional, Tuple

NAMESPACE = "i18n"
INLINE_SEPARATOR = "_"
PATH_SEPARATOR = "."


def compose_key(
    field: str,
    locale: str,
    separator: str = INLINE_SEPARATOR,
    namespace: str = NAMESPACE,
) -> str:
    """Build the storage key of one field in one locale.

    Args:
        field: Translatable field name.
        locale: Locale identifier.
        separator: Separator between segments.
        namespace: Leading namespace segment.

    Returns:
        The composed key.
    """
    return f"{namespace}{separator}{field}{separator}{locale}"


def decompose_key(
    key: str,
    separator: str = INLINE_SEPARATOR,
    namespace: str = NAMESPACE,
    locales: Optional[Iterable[str]] = None,
) -> Optional[Tuple[str, str]]:
    """Split a composed key back into (field, locale).

    Field names may contain the separator, so the locale is taken from the
    end of the key. When the configured locales are known they are matched
    longest first, which keeps locales like ``pt_BR`` intact.

    Args:
        key: Candidate key.
        separator: Separator used when composing.
        namespace: Namespace used when composing.
        locales: Known locales, if any.

    Returns:
        (field, locale), or None if the key is not a composed key.
    """
    prefix = f"{namespace}{separator}"
    if not key.startswith(prefix):
        return None
    rest = key[len(prefix) :]

    if locales is not None:
        for locale in sorted(locales, key=len, reverse=True):
            suffix = f"{separator}{locale}"
            if rest.endswith(suffix) and len(rest) > len(suffix):
                return rest[: -len(suffix)], locale
        return None

    field, found, locale = rest.rpartition(separator)
    if not found or not field or not locale:
        return None
    return field, locale


def parse_qualified_key(
    key: str,
    fields: Iterable[str],
    locales: Iterable[str],
    namespace: str = NAMESPACE,
) -> Optional[Tuple[str, str]]:
    """Recognize a locale-qualified reference to a translatable field.

    Accepted forms are ``<namespace>.<field>.<locale>`` and
    ``<locale>.<field>``; both must name a configured field and locale.

    Args:
        key: Candidate key.
        fields: Translatable fields.
        locales: Configured locales.
        namespace: Translation namespace.

    Returns:
        (field, locale), or None.
    """
    fields = set(fields)
    locales = set(locales)
    parts = key.split(PATH_SEPARATOR)

    if len(parts) == 3 and parts[0] == namespace:
        if parts[1] in fields and parts[2] in locales:
            return parts[1], parts[2]
        return None
    if len(parts) == 2 and parts[0] in locales and parts[1] in fields:
        return parts[1], parts[0]
    return None
