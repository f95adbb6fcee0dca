import sys
from pathlib import Path

import pytest
import structlog

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `infrastructure.configuration`) works during pytest collection.
# Pytest may import `conftest` before the project root is on sys.path
# depending on invocation; add it explicitly here before importing them.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from infrastructure.configuration import Settings, TranslatableSettings


@pytest.fixture(autouse=True)
def clean_log_context():
    """Start and end every test with an empty structlog context."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def translatable_settings():
    """TranslatableSettings with explicit values, independent of the environment."""
    return TranslatableSettings(
        TRANSLATABLE_LOCALE="en",
        TRANSLATABLE_LOCALES={"en": "English", "it": "Italiano", "ja": "日本語"},
        TRANSLATABLE_NAMESPACE="i18n",
        TRANSLATABLE_SEPARATOR="_",
    )


@pytest.fixture
def settings(translatable_settings):
    """Settings aggregating the explicit translatable section."""
    return Settings(translatable=translatable_settings)
