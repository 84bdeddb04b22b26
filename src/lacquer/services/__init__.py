"""Process-level services (configuration)."""

from .settings import PLATFORM_CHOICES, Settings, SettingsStore, get_settings, reset_settings

__all__ = ["PLATFORM_CHOICES", "Settings", "SettingsStore", "get_settings", "reset_settings"]
