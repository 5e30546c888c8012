"""Config settings – env-based configuration."""
from mp_persistence.config.settings.base import PersistenceSettings, Settings
from mp_persistence.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "PersistenceSettings", "Settings", "SettingsLoader"]
