"""Infrastructure modules for the translatable records application.

Centralized infrastructure components:
- configuration: Settings management (settings, TranslatableSettings)
- logging: Structured logging (get_module_logger, bind_request_context)
- i18n: Ambient locale configuration (LocaleProvider, LocaleCatalog)
- persistence: Record models and filter chains (MemoryModel, Entity)
"""

# Configuration
from infrastructure.configuration import settings

# Logging
from infrastructure.logging import bind_request_context, get_module_logger, logger

# Locales
from infrastructure.i18n import LocaleProvider, SettingsLocaleProvider

# Persistence
from infrastructure.persistence import Entity, MemoryModel

__all__ = [
    # Configuration
    "settings",
    # Logging
    "get_module_logger",
    "logger",
    "bind_request_context",
    # Locales
    "LocaleProvider",
    "SettingsLocaleProvider",
    # Persistence
    "Entity",
    "MemoryModel",
]
