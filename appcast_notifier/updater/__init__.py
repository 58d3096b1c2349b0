"""Updater module for appcast-based update checks.

This module handles checking for new releases:
- compare_versions: Ordering of loosely structured version strings
- FeedParser: Appcast parsing into FeedEntry / FeedDocument
- FeedClient: Appcast download over HTTP(S)
- UpdateChecker: The check workflow (automatic and manual variants)
- Notifiers: LoggingNotifier, QueuedNotifier
"""

from .version import compare_versions, is_newer, split_version
from .appcast import FeedDocument, FeedEntry, FeedParser, parse_appcast
from .exceptions import (
    UpdateCheckError,
    FeedURLNotSpecifiedError,
    FeedTransportError,
    AppcastParseError,
)
from .feed_client import FeedClient
from .notifications import Notifier, LoggingNotifier, QueuedNotifier
from .checker import (
    CheckOutcome,
    OutcomeKind,
    UpdateChecker,
    skip_if_preferred,
    never_skip,
    next_check_time,
    is_check_due,
)

__all__ = [
    # Versions
    "compare_versions",
    "is_newer",
    "split_version",
    # Appcast
    "FeedDocument",
    "FeedEntry",
    "FeedParser",
    "parse_appcast",
    # Errors
    "UpdateCheckError",
    "FeedURLNotSpecifiedError",
    "FeedTransportError",
    "AppcastParseError",
    # Network
    "FeedClient",
    # Notifications
    "Notifier",
    "LoggingNotifier",
    "QueuedNotifier",
    # Workflow
    "CheckOutcome",
    "OutcomeKind",
    "UpdateChecker",
    "skip_if_preferred",
    "never_skip",
    "next_check_time",
    "is_check_due",
]
