"""Settings dataclasses and persistence helpers."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from ..codable import JSONEncoder, decode, encode
from ..errors import DecodingError

__all__ = [
    "PLATFORM_CHOICES",
    "Settings",
    "SettingsStore",
    "get_settings",
    "reset_settings",
]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".lacquer"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_PATH_ENV = "LACQUER_SETTINGS_PATH"
_ENV_OVERRIDES: Mapping[str, str] = {
    "LACQUER_FONT_FAMILY": "font_family",
    "LACQUER_PLATFORM": "platform",
    "LACQUER_LOG_DIR": "log_dir",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "LACQUER_STRICT_PATTERNS": "strict_patterns",
    "LACQUER_DEBUG_LOGGING": "debug_logging",
}
_FLOAT_ENV_OVERRIDES: Mapping[str, str] = {
    "LACQUER_SYSTEM_FONT_SIZE": "system_font_size",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
PLATFORM_CHOICES: tuple[str, ...] = ("auto", "qt", "headless")


@dataclass(slots=True)
class Settings:
    """User-configurable defaults for styling and diagnostics."""

    font_family: str = "System"
    system_font_size: float = 13.0
    platform: str = "auto"
    strict_patterns: bool = False
    debug_logging: bool = False
    log_dir: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.platform = (self.platform or "auto").strip().lower()
        if self.platform not in PLATFORM_CHOICES:
            LOGGER.warning("Unknown platform %r; falling back to 'auto'", self.platform)
            self.platform = "auto"
        if self.system_font_size <= 0:
            raise ValueError("system_font_size must be positive")


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | str | None = None) -> None:
        env_path = os.environ.get(_SETTINGS_PATH_ENV)
        self._path = Path(path or env_path or _DEFAULT_SETTINGS_PATH).expanduser()

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, applying runtime and environment overrides."""

        settings = self._read()
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="runtime")
        return self._apply_env_overrides(settings)

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk with an atomic rename."""

        body = encode(settings, JSONEncoder(indent=2, sort_keys=True))
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_bytes(body)
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read(self) -> Settings:
        if not self._path.exists():
            return Settings()
        try:
            settings = decode(Settings, self._path.read_bytes())
        except FileNotFoundError:
            return Settings()
        except DecodingError as exc:
            LOGGER.warning("Settings file %s could not be decoded: %s", self._path, exc)
            return Settings()
        LOGGER.debug("Settings loaded from %s", self._path)
        return settings

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str,
    ) -> Settings:
        allowed = {item.name for item in fields(Settings)}
        filtered: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in allowed or value is None:
                continue
            filtered[key] = value
        metadata_override = filtered.get("metadata")
        if isinstance(metadata_override, Mapping):
            merged_metadata = dict(settings.metadata or {})
            merged_metadata.update(metadata_override)
            filtered["metadata"] = merged_metadata
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _FLOAT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = float(value)
            except ValueError:
                LOGGER.warning("Environment override %s=%s is not a valid float", env_name, value)
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


_ACTIVE_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""

    global _ACTIVE_SETTINGS
    if _ACTIVE_SETTINGS is None:
        _ACTIVE_SETTINGS = SettingsStore().load()
    return _ACTIVE_SETTINGS


def reset_settings(settings: Settings | None = None) -> None:
    """Replace the cached settings; ``None`` forces a reload on next access."""

    global _ACTIVE_SETTINGS
    _ACTIVE_SETTINGS = settings
