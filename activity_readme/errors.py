"""
Exception types raised by the activity README updater.
"""

from typing import Optional


class ActivityReadmeError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(ActivityReadmeError):
    """A required credential or setting is missing or invalid."""


class UpstreamFetchError(ActivityReadmeError):
    """
    An upstream API answered with a non-success status or could not be reached.

    Args:
        source: Human readable name of the API (e.g. "GitHub GraphQL").
        message: Short description of the failure.
        status: HTTP status code when one was received.
        body: Response body as returned by the API.
    """

    def __init__(self, source: str, message: str, status: Optional[int] = None, body: str = "") -> None:
        self.source = source
        self.status = status
        self.body = body
        detail = f"{source} error"
        if status is not None:
            detail += f" ({status})"
        detail += f": {message}"
        if body:
            detail += f": {body}"
        super().__init__(detail)


class ResponseSchemaError(UpstreamFetchError):
    """An upstream response did not have the expected shape."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(source, f"unexpected response schema: {message}")


class DocumentAccessError(ActivityReadmeError):
    """The target document could not be read or written."""
