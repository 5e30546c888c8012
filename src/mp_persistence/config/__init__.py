"""Config – 12-factor settings and loaders."""

from mp_persistence.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    PersistenceSettings,
    Settings,
    SettingsLoader,
)
from mp_persistence.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "PersistenceSettings",
    "Settings",
    "SettingsLoader",
]
