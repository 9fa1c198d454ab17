"""Public exceptions for the Insta SDK."""

from typing import Any


class InstaError(Exception):
    """Base exception for all Insta SDK errors."""


class InstaAPIError(InstaError):
    """Error from the Instagram API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InstaConfigError(InstaError):
    """Configuration error (invalid env vars, invalid settings)."""


class InstaValidationError(InstaError):
    """Validation error for request/response data."""


class BackReferenceReleasedError(InstaError):
    """The client owning the settings was released before a deferred step ran."""

    def __init__(self, message: str = "`weak` reference was released.") -> None:
        super().__init__(message)


class InvalidURLError(InstaError):
    """A request URL could not be resolved."""

    def __init__(self, message: str = "Invalid URL.", url: Any = None) -> None:
        super().__init__(message)
        self.url = url


class InvalidResponseError(InstaAPIError):
    """The response had an unexpected status code or no payload."""

    def __init__(self, message: str = "Invalid response.", status_code: int | None = None) -> None:
        super().__init__(message, status_code=status_code)


class DecodeError(InstaValidationError):
    """The response payload did not match the expected type."""
