"""Appcast feed parsing for Appcast Notifier.

Reads a Sparkle-style appcast (RSS channel of items, each carrying an
enclosure with version metadata) and keeps the highest-versioned release.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple, Union
from xml.parsers.expat import ErrorString

from appcast_notifier.updater.exceptions import AppcastParseError
from appcast_notifier.updater.version import compare_versions

logger = logging.getLogger("appcast_notifier.appcast")


# Namespaced names are matched as "<namespace uri>#<local name>"
NS_SEPARATOR = "#"
NS_SPARKLE = "http://www.andymatuschak.org/xml-namespaces/sparkle"


def ns_name(namespace: str, name: str) -> str:
    """Build the qualified name of a namespaced element or attribute."""
    return f"{namespace}{NS_SEPARATOR}{name}"


NODE_CHANNEL = "channel"
NODE_ITEM = "item"
NODE_RELNOTES = ns_name(NS_SPARKLE, "releaseNotesLink")
NODE_TITLE = "title"
NODE_DESCRIPTION = "description"
NODE_ENCLOSURE = "enclosure"
ATTR_URL = "url"
ATTR_VERSION = ns_name(NS_SPARKLE, "version")
ATTR_SHORTVERSION = ns_name(NS_SPARKLE, "shortVersionString")


def qualified_name(tag: str) -> str:
    """
    Convert an ElementTree name to its qualified form.

    ElementTree spells namespaced names as "{uri}local"; they are
    rewritten to "uri#local". Names without a namespace are unchanged.
    """
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return ns_name(namespace, local)
    return tag


@dataclass(frozen=True)
class FeedEntry:
    """A release advertised by the appcast."""
    download_url: str
    version: str
    short_version: str = ""
    title: str = ""
    description: str = ""
    release_notes_url: str = ""

    @property
    def display_version(self) -> str:
        """Human-readable version string."""
        return self.short_version or self.version


@dataclass
class FeedDocument:
    """
    Parse result being built for one appcast.

    The enclosure fields hold the best release seen so far; the text
    fields are shared by all items of the feed.
    """
    download_url: str = ""
    version: Optional[str] = None
    short_version: str = ""
    title: str = ""
    description: str = ""
    release_notes_url: str = ""

    @property
    def has_release(self) -> bool:
        """True if a qualifying enclosure was found."""
        return self.version is not None

    def to_entry(self) -> Optional[FeedEntry]:
        """Snapshot the document as a FeedEntry, None if there is no release."""
        if self.version is None:
            return None
        return FeedEntry(
            download_url=self.download_url,
            version=self.version,
            short_version=self.short_version,
            title=self.title,
            description=self.description,
            release_notes_url=self.release_notes_url,
        )


@dataclass
class _ParseState:
    """Nesting depths of the elements the parser cares about."""
    in_channel: int = 0
    in_item: int = 0
    in_relnotes: int = 0
    in_title: int = 0
    in_description: int = 0


class FeedParser:
    """
    Parses appcast XML into a FeedDocument.

    Every call to parse() starts from a clean state, so the best version
    of one feed never leaks into another.

    Usage:
        document = FeedParser().parse(xml_text)
        entry = document.to_entry()
    """

    def __init__(self):
        self._state = _ParseState()
        self._document = FeedDocument()
        self._pending_text: Optional[Tuple[ET.Element, str]] = None

    def parse(self, data: Union[str, bytes]) -> FeedDocument:
        """
        Parse an appcast document.

        Args:
            data: Raw appcast XML

        Returns:
            FeedDocument with the highest-versioned release

        Raises:
            AppcastParseError: If the document is not well-formed XML
        """
        self._state = _ParseState()
        self._document = FeedDocument()
        self._pending_text = None

        parser = ET.XMLPullParser(events=("start", "end"))
        try:
            parser.feed(data)
            self._dispatch(parser.read_events())
            parser.close()
            self._dispatch(parser.read_events())
        except ET.ParseError as e:
            line, column = e.position
            raise AppcastParseError(ErrorString(e.code), line, column) from e

        document = self._document
        self._document = FeedDocument()
        self._pending_text = None
        if document.has_release:
            logger.debug(f"Best release in appcast: {document.version}")
        else:
            logger.debug("No release with a version found in appcast")
        return document

    def _dispatch(self, events: Iterable[Tuple[str, ET.Element]]) -> None:
        """Feed start and end events to the handlers in document order."""
        for event, element in events:
            # Character data before this tag is complete once the tag is seen
            self._flush_text()
            name = qualified_name(element.tag)
            if event == "start":
                self._on_start(name, element.attrib)
                self._pending_text = (element, "text")
            else:
                self._on_end(name)
                self._pending_text = (element, "tail")

    def _flush_text(self) -> None:
        if self._pending_text is None:
            return
        element, attr = self._pending_text
        self._pending_text = None
        self._on_text(getattr(element, attr))

    def _on_start(self, name: str, attrs: Dict[str, str]) -> None:
        state = self._state

        if name == NODE_CHANNEL:
            state.in_channel += 1
        elif state.in_channel and name == NODE_ITEM:
            state.in_item += 1
        elif state.in_item:
            if name == NODE_RELNOTES:
                state.in_relnotes += 1
            elif name == NODE_TITLE:
                state.in_title += 1
            elif name == NODE_DESCRIPTION:
                state.in_description += 1
            elif name == NODE_ENCLOSURE:
                self._on_enclosure(
                    {qualified_name(k): v for k, v in attrs.items()}
                )

    def _on_end(self, name: str) -> None:
        state = self._state

        if state.in_item and name == NODE_RELNOTES:
            state.in_relnotes = max(0, state.in_relnotes - 1)
        elif state.in_item and name == NODE_TITLE:
            state.in_title = max(0, state.in_title - 1)
        elif state.in_item and name == NODE_DESCRIPTION:
            state.in_description = max(0, state.in_description - 1)
        elif state.in_channel and name == NODE_ITEM:
            # Keep going: a later item may carry a newer version.
            state.in_item = max(0, state.in_item - 1)
        elif name == NODE_CHANNEL:
            state.in_channel = max(0, state.in_channel - 1)

    def _on_text(self, text: Optional[str]) -> None:
        if not text:
            return

        state = self._state
        document = self._document
        if state.in_relnotes:
            document.release_notes_url += text
        elif state.in_title:
            document.title += text
        elif state.in_description:
            document.description += text

    def _on_enclosure(self, attrs: Dict[str, str]) -> None:
        """Adopt the enclosure if it is newer than the best one so far."""
        version = attrs.get(ATTR_VERSION)
        if version is None:
            logger.debug("Ignoring enclosure without a version attribute")
            return

        document = self._document
        if document.version is not None and compare_versions(version, document.version) <= 0:
            logger.debug(f"Ignoring release {version}, already have {document.version}")
            return

        document.download_url = attrs.get(ATTR_URL, "")
        document.version = version
        document.short_version = attrs.get(ATTR_SHORTVERSION, "")


def parse_appcast(data: Union[str, bytes]) -> Optional[FeedEntry]:
    """
    Parse an appcast and return its newest release.

    Args:
        data: Raw appcast XML

    Returns:
        FeedEntry for the highest version, or None if no item has one

    Raises:
        AppcastParseError: If the document is not well-formed XML
    """
    return FeedParser().parse(data).to_entry()
