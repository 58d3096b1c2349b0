"""Update check workflow for Appcast Notifier.

One check cycle downloads the appcast, picks its newest release,
compares it with the running version and tells the user about it
unless they asked to skip that version.

Two flavours are provided:
- UpdateChecker.automatic(): periodic background checks. Cached feed
  copies are acceptable and skipped versions stay quiet.
- UpdateChecker.manual(): checks the user asked for. Always fetches a
  fresh feed and always shows an available update, even a skipped one.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, Union

from appcast_notifier.config.settings import AppSettings, MIN_CHECK_INTERVAL
from appcast_notifier.updater.appcast import FeedEntry, parse_appcast
from appcast_notifier.updater.exceptions import FeedURLNotSpecifiedError
from appcast_notifier.updater.notifications import Notifier
from appcast_notifier.updater.version import compare_versions

logger = logging.getLogger("appcast_notifier.checker")


class SettingsProvider(Protocol):
    """Settings the update checker reads and writes."""

    def get_feed_url(self) -> str:
        ...

    def get_app_version(self) -> str:
        ...

    def read_skip_preference(self) -> Optional[str]:
        ...

    def write_last_check_time(self, timestamp: float) -> None:
        ...


class DocumentFetcher(Protocol):
    """Retrieves the raw appcast document."""

    def fetch_document(self, url: str, bypass_cache: bool = False) -> Union[str, bytes]:
        ...


# Decides whether an available update should be kept from the user
SkipPolicy = Callable[[FeedEntry, SettingsProvider], bool]


def skip_if_preferred(entry: FeedEntry, settings: SettingsProvider) -> bool:
    """Skip the update if the user chose to skip exactly this version."""
    return settings.read_skip_preference() == entry.version


def never_skip(entry: FeedEntry, settings: SettingsProvider) -> bool:
    """Always show the update, even one the user skipped earlier."""
    return False


class OutcomeKind(Enum):
    """Result of one check cycle."""
    NO_UPDATE = "no_update"
    UPDATE_AVAILABLE = "update_available"
    ERROR = "error"


@dataclass(frozen=True)
class CheckOutcome:
    """Outcome of an update check."""
    kind: OutcomeKind
    entry: Optional[FeedEntry] = None
    reason: Optional[str] = None

    @property
    def is_update_available(self) -> bool:
        """True if a newer release should be offered."""
        return self.kind == OutcomeKind.UPDATE_AVAILABLE

    @classmethod
    def no_update(cls) -> "CheckOutcome":
        return cls(kind=OutcomeKind.NO_UPDATE)

    @classmethod
    def update_available(cls, entry: FeedEntry) -> "CheckOutcome":
        return cls(kind=OutcomeKind.UPDATE_AVAILABLE, entry=entry)

    @classmethod
    def error(cls, reason: str) -> "CheckOutcome":
        return cls(kind=OutcomeKind.ERROR, reason=reason)


class UpdateChecker:
    """
    Runs one update check cycle.

    The checker is synchronous; use CheckWorker to run it in the
    background.

    Usage:
        checker = UpdateChecker.automatic(settings, FeedClient(), notifier)
        outcome = checker.run()
    """

    def __init__(
        self,
        settings: SettingsProvider,
        client: DocumentFetcher,
        notifier: Notifier,
        bypass_cache: bool = False,
        skip_policy: SkipPolicy = skip_if_preferred,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize the checker.

        Args:
            settings: Source of feed URL, app version and skip preference
            client: Downloads the appcast
            notifier: Receives the outcome
            bypass_cache: Require a fresh, non-cached appcast
            skip_policy: Decides whether an available update stays hidden
            clock: Returns the current Unix time
        """
        self._settings = settings
        self._client = client
        self._notifier = notifier
        self._bypass_cache = bypass_cache
        self._skip_policy = skip_policy
        self._clock = clock

    @classmethod
    def automatic(
        cls,
        settings: SettingsProvider,
        client: DocumentFetcher,
        notifier: Notifier,
        clock: Callable[[], float] = time.time
    ) -> "UpdateChecker":
        """Checker for scheduled checks."""
        return cls(
            settings,
            client,
            notifier,
            bypass_cache=False,
            skip_policy=skip_if_preferred,
            clock=clock,
        )

    @classmethod
    def manual(
        cls,
        settings: SettingsProvider,
        client: DocumentFetcher,
        notifier: Notifier,
        clock: Callable[[], float] = time.time
    ) -> "UpdateChecker":
        """Checker for checks the user explicitly asked for."""
        return cls(
            settings,
            client,
            notifier,
            bypass_cache=True,
            skip_policy=never_skip,
            clock=clock,
        )

    @property
    def bypass_cache(self) -> bool:
        """True if the appcast must not come from a cache."""
        return self._bypass_cache

    def run(self) -> CheckOutcome:
        """
        Check for updates and notify the user of the result.

        Returns:
            NO_UPDATE or UPDATE_AVAILABLE outcome

        Raises:
            FeedURLNotSpecifiedError: If no appcast URL is configured
            FeedTransportError: If the appcast could not be downloaded
            AppcastParseError: If the appcast is malformed
            Exception: Anything else that went wrong, after the notifier
                was told about it
        """
        try:
            outcome = self._check()

            if outcome.is_update_available:
                self._notifier.notify_update_available(outcome.entry)
            else:
                self._notifier.notify_no_update()

            return outcome

        except Exception as e:
            logger.error(f"Update check failed: {e}")
            self._notifier.notify_check_error(str(e))
            raise

    def _check(self) -> CheckOutcome:
        url = self._settings.get_feed_url()
        if not url:
            raise FeedURLNotSpecifiedError()

        logger.info(f"Checking for updates at {url}")
        document = self._client.fetch_document(url, bypass_cache=self._bypass_cache)
        entry = parse_appcast(document)

        self._settings.write_last_check_time(self._clock())

        if entry is None:
            logger.warning("Appcast does not list any release with a version")
            return CheckOutcome.no_update()

        current_version = self._settings.get_app_version()

        # Check if our version is out of date.
        if compare_versions(current_version, entry.version) >= 0:
            logger.info(f"Version {current_version} is up to date (latest: {entry.version})")
            return CheckOutcome.no_update()

        if self._skip_policy(entry, self._settings):
            logger.info(f"Version {entry.version} was skipped by the user")
            return CheckOutcome.no_update()

        logger.info(f"Update available: {current_version} -> {entry.version}")
        return CheckOutcome.update_available(entry)


def next_check_time(settings: AppSettings) -> int:
    """
    When the next automatic check is due.

    Args:
        settings: Current application settings

    Returns:
        Unix time of the next check, 0 if no check was ever made
    """
    if not settings.last_check_time:
        return 0
    interval = max(settings.check_interval, MIN_CHECK_INTERVAL)
    return settings.last_check_time + interval


def is_check_due(settings: AppSettings, now: Optional[float] = None) -> bool:
    """
    True if an automatic check should run now.

    Args:
        settings: Current application settings
        now: Current Unix time (default: time.time())
    """
    if not settings.auto_check_updates:
        return False
    if now is None:
        now = time.time()
    return now >= next_check_time(settings)
