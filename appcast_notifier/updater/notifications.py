"""Update notification surfaces for Appcast Notifier.

The update checker reports its outcome through a Notifier. The UI
layer supplies its own implementation; LoggingNotifier is used by the
CLI and QueuedNotifier hands notifications from the worker thread over
to whichever thread owns the UI.
"""

import logging
import queue
from typing import Any, List, Optional, Protocol, Tuple

from appcast_notifier.updater.appcast import FeedEntry

logger = logging.getLogger("appcast_notifier.notifications")


# Notification kinds carried by QueuedNotifier
NO_UPDATE = "no_update"
UPDATE_AVAILABLE = "update_available"
CHECK_ERROR = "check_error"


class Notifier(Protocol):
    """Protocol defining how a check result reaches the user."""

    def notify_no_update(self) -> None:
        """Called when the running version is up to date."""
        ...

    def notify_update_available(self, entry: FeedEntry) -> None:
        """Called when a newer release should be offered."""
        ...

    def notify_check_error(self, reason: str) -> None:
        """Called when the check failed."""
        ...


class LoggingNotifier:
    """Reports check results to the application log."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger

    def notify_no_update(self) -> None:
        self._log.info("No update available")

    def notify_update_available(self, entry: FeedEntry) -> None:
        self._log.info(
            f"Update available: {entry.display_version} ({entry.download_url})"
        )

    def notify_check_error(self, reason: str) -> None:
        self._log.error(f"Update check failed: {reason}")


class QueuedNotifier:
    """
    Thread-safe hand-off of notifications to the UI thread.

    Usage:
        # In main thread:
        notifications = QueuedNotifier()
        checker = UpdateChecker.automatic(settings, client, notifications)

        # In UI update loop (main thread):
        def poll_updates():
            notifications.dispatch_pending(ui_notifier)
            root.after(100, poll_updates)
    """

    def __init__(self):
        """Initialize the notification queue."""
        self._queue: queue.Queue[Tuple[str, Any]] = queue.Queue()

    def notify_no_update(self) -> None:
        self._queue.put((NO_UPDATE, None))

    def notify_update_available(self, entry: FeedEntry) -> None:
        self._queue.put((UPDATE_AVAILABLE, entry))

    def notify_check_error(self, reason: str) -> None:
        self._queue.put((CHECK_ERROR, reason))

    def get_all(self) -> List[Tuple[str, Any]]:
        """
        Get all pending notifications from the queue.

        Returns:
            List of (kind, data) tuples
        """
        updates = []
        while True:
            try:
                updates.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return updates

    def dispatch_pending(self, target: Notifier) -> int:
        """
        Deliver pending notifications to target on the calling thread.

        Args:
            target: Notifier owned by the UI thread

        Returns:
            Number of notifications delivered
        """
        updates = self.get_all()
        for kind, data in updates:
            if kind == NO_UPDATE:
                target.notify_no_update()
            elif kind == UPDATE_AVAILABLE:
                target.notify_update_available(data)
            elif kind == CHECK_ERROR:
                target.notify_check_error(data)
        return len(updates)
