"""Domain exceptions."""

from __future__ import annotations


class GodseyeError(Exception):
    """Base class for all godseye errors."""


class ConfigError(GodseyeError):
    """Raised when required configuration is missing for an operation."""


class ProviderError(GodseyeError):
    """Base class for metadata provider failures.

    Anything raised by a provider adapter (other than cancellation) is a
    ProviderError; coordinators surface it as one generic message.
    """


class ProviderUnavailableError(ProviderError):
    """Raised when the provider cannot be reached (DNS, connect, timeout)."""


class ProviderHTTPError(ProviderError):
    """Raised when the provider answers with a non-success status."""

    def __init__(self, status_code: int, path: str) -> None:
        super().__init__(f"provider returned HTTP {status_code} for {path}")
        self.status_code = status_code
        self.path = path


class ProviderAuthError(ProviderHTTPError):
    """Raised on 401: the API key was rejected."""


class MediaNotFoundError(ProviderHTTPError):
    """Raised on 404: the requested title does not exist."""


class MalformedResponseError(ProviderError):
    """Raised when a provider payload is not valid JSON or has the wrong shape."""
