"""Configuration module for Appcast Notifier.

This module handles application settings:
- SettingsManager: JSON-based settings persistence
- SettingsStore: Settings view used by the update checker
- Paths: Platform data directory discovery
- AppSettings: Settings dataclass
"""
