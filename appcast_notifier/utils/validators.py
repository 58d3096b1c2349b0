"""Input validators for Appcast Notifier.

Provides validation functions for user inputs like appcast URLs,
version strings and check intervals.
"""

from typing import Optional, Tuple
from urllib.parse import urlparse

from appcast_notifier.config.settings import MIN_CHECK_INTERVAL


ALLOWED_URL_SCHEMES = ("http", "https")


def validate_feed_url(url: str) -> Tuple[bool, Optional[str]]:
    """
    Validate an appcast URL.

    Args:
        url: URL string to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not url.strip():
        return False, "Appcast URL is required"

    url = url.strip()
    parsed = urlparse(url)

    if parsed.scheme.lower() not in ALLOWED_URL_SCHEMES:
        return False, f"Appcast URL must use http or https: {url}"

    if not parsed.netloc:
        return False, f"Appcast URL has no host: {url}"

    return True, None


def validate_version(version: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a version string.

    Any text is comparable, so only blank versions are rejected.

    Args:
        version: Version string to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not version or not version.strip():
        return False, "Version is required"

    if version != version.strip():
        return False, f"Version must not start or end with whitespace: '{version}'"

    return True, None


def validate_check_interval(interval: int) -> Tuple[bool, Optional[str]]:
    """
    Validate an automatic check interval in seconds.

    Args:
        interval: Interval in seconds

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(interval, int):
        try:
            interval = int(interval)
        except (ValueError, TypeError):
            return False, "Check interval must be a number"

    if interval < MIN_CHECK_INTERVAL:
        return False, (
            f"Check interval must be at least {MIN_CHECK_INTERVAL} seconds, got {interval}"
        )

    return True, None
