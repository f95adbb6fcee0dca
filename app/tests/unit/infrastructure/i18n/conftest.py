"""Feature-level fixtures for locale configuration tests."""

import pytest
import yaml

from infrastructure.i18n import YAMLLocaleCatalogLoader


@pytest.fixture
def catalog_file(tmp_path):
    """Create a YAML locale catalog with labels."""
    path = tmp_path / "locales.yml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(
            {"current": "ja", "locales": {"en": "English", "it": "Italiano", "ja": "日本語"}},
            f,
            allow_unicode=True,
        )
    return path


@pytest.fixture
def yaml_loader(catalog_file):
    """YAMLLocaleCatalogLoader for the temporary catalog, cache disabled."""
    return YAMLLocaleCatalogLoader(catalog_file, use_cache=False)
