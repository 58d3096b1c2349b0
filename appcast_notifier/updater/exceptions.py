"""Update-check exceptions for Appcast Notifier.

Custom exception hierarchy for the update check cycle so callers can
tell configuration, transport and feed problems apart while handling
them in one place.
"""

from typing import Optional


class UpdateCheckError(Exception):
    """Base exception for all update-check errors."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class FeedURLNotSpecifiedError(UpdateCheckError):
    """No appcast URL is configured."""

    def __init__(self):
        super().__init__("Appcast URL not specified.")


class FeedTransportError(UpdateCheckError):
    """Failed to retrieve the appcast document."""

    def __init__(
        self,
        url: str,
        reason: str,
        status_code: Optional[int] = None,
        original_error: Exception = None
    ):
        self.url = url
        self.status_code = status_code
        message = f"Failed to download appcast from '{url}': {reason}"
        super().__init__(message, original_error)


class AppcastParseError(UpdateCheckError):
    """The appcast document is not well-formed XML."""

    def __init__(
        self,
        reason: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        original_error: Exception = None
    ):
        self.reason = reason
        self.line = line
        self.column = column
        message = f"XML parser error: {reason}"
        if line is not None:
            message += f" (line {line}, column {column})"
        super().__init__(message, original_error)
