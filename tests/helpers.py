"""Shared test helpers: appcast builders and fake collaborators."""

from typing import List, Optional, Tuple


SPARKLE_NS = "http://www.andymatuschak.org/xml-namespaces/sparkle"

TEST_FEED_URL = "https://updates.example.com/appcast.xml"


def make_item(
    version: Optional[str],
    url: str = "",
    short_version: Optional[str] = None,
    title: str = "",
    description: str = "",
    release_notes: str = "",
) -> str:
    """Build one appcast <item> element."""
    url = url or f"https://updates.example.com/app-{version}.zip"
    attrs = [f'url="{url}"', 'type="application/octet-stream"']
    if version is not None:
        attrs.append(f'sparkle:version="{version}"')
    if short_version is not None:
        attrs.append(f'sparkle:shortVersionString="{short_version}"')

    parts = ["<item>"]
    if title:
        parts.append(f"<title>{title}</title>")
    if description:
        parts.append(f"<description>{description}</description>")
    if release_notes:
        parts.append(f"<sparkle:releaseNotesLink>{release_notes}</sparkle:releaseNotesLink>")
    parts.append(f"<enclosure {' '.join(attrs)} />")
    parts.append("</item>")
    return "".join(parts)


def make_appcast(*items: str) -> str:
    """Wrap items into a complete appcast document."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<rss version="2.0" xmlns:sparkle="{SPARKLE_NS}">'
        "<channel><title>Example App Changelog</title>"
        f"{''.join(items)}"
        "</channel></rss>"
    )


class FakeSettings:
    """In-memory settings collaborator."""

    def __init__(
        self,
        feed_url: str = TEST_FEED_URL,
        app_version: str = "1.0",
        skip_version: Optional[str] = None
    ):
        self.feed_url = feed_url
        self.app_version = app_version
        self.skip_version = skip_version
        self.check_times: List[float] = []

    def get_feed_url(self) -> str:
        return self.feed_url

    def get_app_version(self) -> str:
        return self.app_version

    def read_skip_preference(self) -> Optional[str]:
        return self.skip_version

    def write_last_check_time(self, timestamp: float) -> None:
        self.check_times.append(timestamp)


class FakeClient:
    """Feed client returning a fixed document."""

    def __init__(self, document: str = "", error: Optional[Exception] = None):
        self.document = document
        self.error = error
        self.requests: List[Tuple[str, bool]] = []

    def fetch_document(self, url: str, bypass_cache: bool = False) -> str:
        self.requests.append((url, bypass_cache))
        if self.error:
            raise self.error
        return self.document


class RecordingNotifier:
    """Notifier that remembers what it was told."""

    def __init__(self):
        self.calls: List[Tuple[str, object]] = []

    def notify_no_update(self) -> None:
        self.calls.append(("no_update", None))

    def notify_update_available(self, entry) -> None:
        self.calls.append(("update_available", entry))

    def notify_check_error(self, reason: str) -> None:
        self.calls.append(("check_error", reason))


