"""Pytest configuration and shared fixtures for Appcast Notifier tests."""

import logging

import pytest
from pathlib import Path
from typing import Generator

from appcast_notifier.config import paths
from tests.helpers import FakeSettings, RecordingNotifier, make_appcast, make_item


@pytest.fixture
def fake_settings() -> FakeSettings:
    """Provide settings for a running version 1.0 with no skipped version."""
    return FakeSettings()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Provide a recording notifier."""
    return RecordingNotifier()


@pytest.fixture
def two_release_appcast() -> str:
    """Appcast listing 1.0 followed by 2.0."""
    return make_appcast(
        make_item("1.0", title="Version 1.0"),
        make_item(
            "2.0",
            short_version="2.0 Final",
            title="Version 2.0",
            release_notes="https://updates.example.com/notes/2.0.html",
        ),
    )


@pytest.fixture
def temp_settings_file(tmp_path: Path) -> Generator[Path, None, None]:
    """Provide a temporary settings file path for testing."""
    settings_file = tmp_path / "settings.json"
    yield settings_file
    # Cleanup handled by tmp_path fixture


@pytest.fixture(autouse=True)
def app_data_dir(tmp_path: Path, monkeypatch) -> Path:
    """Keep settings and log files written by the app inside tmp_path."""
    data_dir = tmp_path / "app_data"
    data_dir.mkdir()
    monkeypatch.setattr(paths, "get_app_data_dir", lambda: data_dir)
    return data_dir


@pytest.fixture(autouse=True)
def reset_app_logger() -> Generator[None, None, None]:
    """Drop handlers installed by setup_logging so tests stay isolated."""
    yield
    logger = logging.getLogger("appcast_notifier")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
