"""Application settings management for Appcast Notifier.

Provides the AppSettings dataclass, SettingsManager for persistence and
SettingsStore, the view of the settings the update checker works with.
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from appcast_notifier.config.paths import get_settings_path


# One day, the default time between automatic checks
DEFAULT_CHECK_INTERVAL = 24 * 60 * 60

# Automatic checks are never scheduled more often than hourly
MIN_CHECK_INTERVAL = 60 * 60


@dataclass
class AppSettings:
    """Application settings that persist between sessions."""

    # Feed and running application
    appcast_url: str = ""
    app_version: str = ""

    # Version the user asked not to be reminded about
    skip_this_version: str = ""

    # Update check schedule
    auto_check_updates: bool = True
    check_interval: int = DEFAULT_CHECK_INTERVAL
    last_check_time: int = 0

    # Network settings
    request_timeout: int = 30

    def to_dict(self) -> dict:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """Create settings from dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)


class SettingsManager:
    """Manages application settings persistence."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            config_path: Optional custom path, defaults to platform standard
        """
        self._config_path = config_path or get_settings_path()
        self._settings: Optional[AppSettings] = None

    @property
    def config_path(self) -> Path:
        """Path to settings file."""
        return self._config_path

    @property
    def settings(self) -> AppSettings:
        """Current settings, loaded from disk on first access."""
        if self._settings is None:
            self.load()
        return self._settings

    def load(self) -> AppSettings:
        """
        Load settings from disk.

        Returns:
            AppSettings instance (defaults if file not found)
        """
        if self._config_path.exists():
            try:
                with open(self._config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                self._settings = AppSettings.from_dict(data)
            except (json.JSONDecodeError, IOError, TypeError, AttributeError):
                # Invalid or unreadable file, use defaults
                self._settings = AppSettings()
        else:
            self._settings = AppSettings()

        return self._settings

    def save(self, settings: AppSettings) -> None:
        """
        Persist settings to disk.

        Args:
            settings: Settings to save
        """
        self._settings = settings

        # Ensure parent directory exists
        self._config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self._config_path, "w", encoding="utf-8") as f:
            json.dump(settings.to_dict(), f, indent=2)

    def reset(self) -> AppSettings:
        """
        Reset to default settings.

        Returns:
            Default AppSettings instance
        """
        self._settings = AppSettings()

        # Remove existing file
        if self._config_path.exists():
            self._config_path.unlink()

        return self._settings

    def update(self, **kwargs) -> AppSettings:
        """
        Update specific settings fields.

        Args:
            **kwargs: Field names and new values

        Returns:
            Updated AppSettings instance
        """
        if self._settings is None:
            self.load()

        for key, value in kwargs.items():
            if hasattr(self._settings, key):
                setattr(self._settings, key, value)

        self.save(self._settings)
        return self._settings


class SettingsStore:
    """
    Settings as seen by the update checker.

    Reads the feed URL, application version and skip preference, and
    records when the last check happened. The feed URL and application
    version can be overridden by the host application, in which case
    they are never written back to disk.
    """

    def __init__(
        self,
        manager: Optional[SettingsManager] = None,
        appcast_url: Optional[str] = None,
        app_version: Optional[str] = None
    ):
        """
        Initialize the store.

        Args:
            manager: Backing settings manager (default: platform settings file)
            appcast_url: Feed URL that takes precedence over the saved one
            app_version: Running application version, overrides the saved one
        """
        self._manager = manager or SettingsManager()
        self._appcast_url = appcast_url
        self._app_version = app_version

    @property
    def manager(self) -> SettingsManager:
        """Backing settings manager."""
        return self._manager

    def get_feed_url(self) -> str:
        """Appcast URL, empty if none is configured."""
        if self._appcast_url:
            return self._appcast_url
        return self._manager.settings.appcast_url.strip()

    def get_app_version(self) -> str:
        """Version string of the running application."""
        if self._app_version is not None:
            return self._app_version
        return self._manager.settings.app_version

    def read_skip_preference(self) -> Optional[str]:
        """Version the user chose to skip, None if not set."""
        return self._manager.settings.skip_this_version or None

    def write_skip_preference(self, version: str) -> None:
        """Remember that the user does not want to hear about version."""
        self._manager.update(skip_this_version=version)

    def clear_skip_preference(self) -> None:
        """Forget any skipped version."""
        self._manager.update(skip_this_version="")

    def write_last_check_time(self, timestamp: float) -> None:
        """Record when the appcast was last checked (Unix time)."""
        self._manager.update(last_check_time=int(timestamp))
