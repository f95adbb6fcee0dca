"""Locale catalog loading from YAML files.

Expected format:

    current: ja
    locales:
      en: English
      it: Italiano
      ja: 日本語
"""

from pathlib import Path
from typing import Any, Dict

import yaml

from infrastructure.i18n.models import LocaleCatalog
from infrastructure.logging import get_module_logger

logger = get_module_logger()


class YAMLLocaleCatalogLoader:
    """Loader for a YAML locale catalog file.

    Attributes:
        path: Path to the YAML file.
        cache: Parsed catalog, once loaded (if caching is enabled).
    """

    def __init__(self, path: Path, use_cache: bool = True):
        """Initialize YAML locale catalog loader.

        Args:
            path: Path to the YAML catalog file.
            use_cache: Whether to keep the parsed catalog in memory.
        """
        self.path = Path(path)
        self.use_cache = use_cache
        self.cache: LocaleCatalog | None = None

    def load(self) -> LocaleCatalog:
        """Load and validate the catalog.

        Returns:
            LocaleCatalog parsed from the file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the YAML is malformed or misses required keys.
        """
        if self.use_cache and self.cache is not None:
            return self.cache

        if not self.path.exists():
            raise FileNotFoundError(f"Locale catalog not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error("yaml_parse_error", file=str(self.path), error=str(e))
            raise ValueError(f"Failed to parse {self.path}: {e}") from e

        catalog = self._parse(data)
        logger.info(
            "loaded_locale_catalog",
            file=str(self.path),
            current=catalog.current,
            locale_count=len(catalog.labels),
        )

        if self.use_cache:
            self.cache = catalog
        return catalog

    def _parse(self, data: Any) -> LocaleCatalog:
        if not isinstance(data, dict):
            raise ValueError(f"Locale catalog {self.path} must be a mapping")

        locales = data.get("locales")
        if isinstance(locales, list):
            labels: Dict[str, str] = {str(code): str(code) for code in locales}
        elif isinstance(locales, dict):
            labels = {str(code): str(label) for code, label in locales.items()}
        else:
            raise ValueError(f"Locale catalog {self.path} has no 'locales' entry")

        current = data.get("current")
        if not current:
            if not labels:
                raise ValueError(f"Locale catalog {self.path} is empty")
            current = next(iter(labels))

        return LocaleCatalog.from_mapping(str(current), labels)

    def clear_cache(self) -> None:
        """Drop the cached catalog."""
        self.cache = None
