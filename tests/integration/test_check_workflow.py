"""Integration tests for the complete update check cycle.

Serves an appcast from a local HTTP server and runs the real feed
client, settings store and background worker against it.
"""

import json

import pytest

from appcast_notifier.config.settings import AppSettings, SettingsManager, SettingsStore
from appcast_notifier.updater.checker import OutcomeKind, UpdateChecker
from appcast_notifier.updater.feed_client import FeedClient
from appcast_notifier.updater.notifications import QueuedNotifier
from appcast_notifier.utils.threading import CheckWorker
from tests.helpers import RecordingNotifier, make_appcast, make_item

from .mock_appcast_server import MockAppcastServer


APPCAST = make_appcast(
    make_item("1.0", title="Version 1.0"),
    make_item(
        "1.1",
        url="https://downloads.example.com/app-1.1.zip",
        short_version="1.1",
        title="Version 1.1",
        release_notes="https://example.com/notes/1.1.html",
    ),
)


@pytest.fixture(autouse=True)
def no_proxy(monkeypatch):
    """Keep requests to the local server away from any configured proxy."""
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")


@pytest.fixture
def server():
    """Run a mock appcast server for the test."""
    with MockAppcastServer(APPCAST) as server:
        yield server


@pytest.fixture
def store(server, temp_settings_file):
    """Settings pointing at the mock server, running version 1.0."""
    manager = SettingsManager(config_path=temp_settings_file)
    manager.save(AppSettings(appcast_url=server.url, app_version="1.0"))
    return SettingsStore(manager)


def run_in_worker(checker):
    """Run a checker on a CheckWorker and wait for the outcome."""
    worker = CheckWorker(checker)
    assert worker.start(ready_timeout=5) is True
    return worker.wait_outcome(timeout=30)


class TestCheckWorkflow:
    """End-to-end check cycles against a local server."""

    def test_automatic_check_finds_update(self, server, store, temp_settings_file):
        """Test the automatic check reports 1.1 and records the check time."""
        notifications = QueuedNotifier()

        with FeedClient(timeout=5) as client:
            outcome = run_in_worker(UpdateChecker.automatic(store, client, notifications))

        assert outcome.kind == OutcomeKind.UPDATE_AVAILABLE
        assert outcome.entry.version == "1.1"
        assert outcome.entry.download_url == "https://downloads.example.com/app-1.1.zip"
        assert outcome.entry.release_notes_url == "https://example.com/notes/1.1.html"

        ui = RecordingNotifier()
        assert notifications.dispatch_pending(ui) == 1
        assert ui.calls == [("update_available", outcome.entry)]

        assert json.loads(temp_settings_file.read_text())["last_check_time"] > 0
        assert "no-cache" not in server.requests[0].get("Cache-Control", "")

    def test_skip_then_manual_check(self, server, store):
        """Test a skipped version is hidden automatically but shown manually."""
        store.write_skip_preference("1.1")
        notifier = RecordingNotifier()

        with FeedClient(timeout=5) as client:
            automatic = run_in_worker(UpdateChecker.automatic(store, client, notifier))
            manual = run_in_worker(UpdateChecker.manual(store, client, notifier))

        assert automatic.kind == OutcomeKind.NO_UPDATE
        assert manual.kind == OutcomeKind.UPDATE_AVAILABLE
        assert server.requests[1]["Cache-Control"] == "no-cache"
        assert server.requests[1]["Pragma"] == "no-cache"

    def test_http_error_is_reported(self, server, store):
        """Test a server error becomes an ERROR outcome and notification."""
        server.status = 500
        notifier = RecordingNotifier()

        with FeedClient(timeout=5) as client:
            outcome = run_in_worker(UpdateChecker.automatic(store, client, notifier))

        assert outcome.kind == OutcomeKind.ERROR
        assert "HTTP 500" in outcome.reason
        assert notifier.calls[0][0] == "check_error"

    def test_malformed_feed_is_reported(self, server, store):
        """Test a broken feed becomes an ERROR outcome."""
        server.document = "<rss><channel><item></channel></rss>"
        notifier = RecordingNotifier()

        with FeedClient(timeout=5) as client:
            outcome = run_in_worker(UpdateChecker.automatic(store, client, notifier))

        assert outcome.kind == OutcomeKind.ERROR
        assert outcome.reason.startswith("XML parser error:")
