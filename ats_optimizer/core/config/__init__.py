from .env import (
    ConfigurationError,
    Settings,
    load_settings,
    settings,
    validate_settings,
)

__all__ = ["ConfigurationError", "Settings", "load_settings", "settings", "validate_settings"]
