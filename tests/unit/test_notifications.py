"""Unit tests for notifiers."""

import logging
import threading

from appcast_notifier.updater.appcast import FeedEntry
from appcast_notifier.updater.notifications import LoggingNotifier, QueuedNotifier
from tests.helpers import RecordingNotifier


ENTRY = FeedEntry(
    download_url="https://example.com/app-2.0.zip",
    version="2000",
    short_version="2.0",
)


class TestLoggingNotifier:
    """Tests for LoggingNotifier."""

    def test_logs_each_outcome(self, caplog):
        """Test every notification is logged at a sensible level."""
        notifier = LoggingNotifier()

        with caplog.at_level(logging.INFO, logger="appcast_notifier"):
            notifier.notify_no_update()
            notifier.notify_update_available(ENTRY)
            notifier.notify_check_error("offline")

        messages = [(r.levelno, r.getMessage()) for r in caplog.records]
        assert (logging.INFO, "No update available") in messages
        assert (
            logging.INFO,
            "Update available: 2.0 (https://example.com/app-2.0.zip)",
        ) in messages
        assert (logging.ERROR, "Update check failed: offline") in messages


class TestQueuedNotifier:
    """Tests for QueuedNotifier."""

    def test_dispatch_in_order(self):
        """Test queued notifications are delivered in order."""
        queued = QueuedNotifier()
        queued.notify_no_update()
        queued.notify_update_available(ENTRY)
        queued.notify_check_error("offline")

        target = RecordingNotifier()
        delivered = queued.dispatch_pending(target)

        assert delivered == 3
        assert target.calls == [
            ("no_update", None),
            ("update_available", ENTRY),
            ("check_error", "offline"),
        ]

    def test_dispatch_empties_queue(self):
        """Test notifications are delivered only once."""
        queued = QueuedNotifier()
        queued.notify_no_update()
        queued.dispatch_pending(RecordingNotifier())

        assert queued.dispatch_pending(RecordingNotifier()) == 0
        assert queued.get_all() == []

    def test_hand_off_from_other_thread(self):
        """Test notifications posted by a worker thread reach the owner thread."""
        queued = QueuedNotifier()
        worker = threading.Thread(target=queued.notify_update_available, args=(ENTRY,))
        worker.start()
        worker.join(timeout=5)

        target = RecordingNotifier()
        queued.dispatch_pending(target)

        assert target.calls == [("update_available", ENTRY)]
