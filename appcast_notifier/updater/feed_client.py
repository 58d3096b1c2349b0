"""HTTP client for downloading appcast documents.

Fetches the raw appcast XML, optionally forcing a fresh copy past any
HTTP caches or proxies.
"""

import logging

import requests

from appcast_notifier import __version__
from appcast_notifier.updater.exceptions import FeedTransportError

logger = logging.getLogger("appcast_notifier.feed_client")


# Request timeout in seconds
REQUEST_TIMEOUT = 30

USER_AGENT = f"AppcastNotifier/{__version__}"

# Sent with manual checks so a just-published release is seen immediately
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


class FeedClient:
    """Downloads appcast documents over HTTP(S)."""

    def __init__(self, timeout: int = REQUEST_TIMEOUT):
        """
        Initialize feed client.

        Args:
            timeout: Request timeout in seconds
        """
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({
            "Accept": "application/rss+xml, application/xml, text/xml, */*",
            "User-Agent": USER_AGENT,
        })

    def fetch_document(self, url: str, bypass_cache: bool = False) -> bytes:
        """
        Download the appcast at url.

        Args:
            url: Appcast URL
            bypass_cache: Ask caches and proxies for an authoritative copy

        Returns:
            Raw document bytes, decoded later by the XML parser

        Raises:
            FeedTransportError: On connection problems or a non-2xx response
        """
        headers = dict(NO_CACHE_HEADERS) if bypass_cache else {}

        try:
            logger.debug(f"Fetching appcast: {url} (bypass_cache={bypass_cache})")
            response = self._session.get(url, headers=headers, timeout=self._timeout)
        except requests.exceptions.Timeout as e:
            logger.error(f"Appcast request timed out: {url}")
            raise FeedTransportError(url, "request timed out", original_error=e)
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Appcast connection error: {e}")
            raise FeedTransportError(url, "unable to connect", original_error=e)
        except requests.exceptions.RequestException as e:
            logger.error(f"Appcast request error: {e}")
            raise FeedTransportError(url, "request failed", original_error=e)

        if not 200 <= response.status_code < 300:
            raise FeedTransportError(
                url,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        logger.info(f"Downloaded appcast ({len(response.content)} bytes)")
        return response.content

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self) -> "FeedClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
