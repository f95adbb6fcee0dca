"""Infrastructure configuration module - public API.

Centralized configuration management using Pydantic BaseSettings with
domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    TranslatableSettings: Ambient locale settings class (for testing)

Example:
    ```python
    from infrastructure.configuration import settings

    current_locale = settings.translatable.locale
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.features import TranslatableSettings

__all__ = ["Settings", "TranslatableSettings", "settings"]
