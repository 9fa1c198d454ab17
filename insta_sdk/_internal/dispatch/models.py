"""Data models for the request dispatch pipeline.

Request-side types (bodies, request specs) and outcome types are plain
frozen dataclasses; wire-facing records are Pydantic models.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, NamedTuple, TypeVar

import httpx
from pydantic import BaseModel, Field

from insta_sdk._internal.http import ResponseMetadata

T = TypeVar("T")

# =============================================================================
# Constants
# =============================================================================

STATUS_OK = 200
POST = "POST"

# =============================================================================
# Request Bodies
# =============================================================================


@dataclass(frozen=True)
class Parameters:
    """Form parameters, sent as `key=value` pairs joined by `&`."""

    params: Mapping[str, Any]


@dataclass(frozen=True)
class RawBytes:
    """Raw bytes, sent verbatim."""

    data: bytes


@dataclass(frozen=True)
class GzipParameters:
    """Form parameters, gzip-compressed, sent with `Content-Encoding: gzip`."""

    params: Mapping[str, Any]


Body = Parameters | RawBytes | GzipParameters

# Either a URL (possibly resolved lazily) or the error its resolution raised.
URLSource = str | httpx.URL | Callable[[], str | httpx.URL] | BaseException

# Closed range of seconds a pre-dispatch delay is drawn from.
DelayRange = tuple[float, float]


@dataclass(frozen=True)
class RequestSpec:
    """Everything needed to dispatch a single request.

    Attributes:
        method: HTTP method requested by the caller. Replaced by POST when a
            body is present.
        url: URL source, resolved right before dispatch.
        body: Optional request body.
        headers: Extra headers, applied last.
        validate_status: Require a 200 status code when decoding.
        deliver_on_response_queue: Hop onto the response queue before invoking
            the completion.
        delay: Optional delay range, overrides the settings default.
    """

    method: str
    url: URLSource
    body: Body | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    validate_status: bool = True
    deliver_on_response_queue: bool = True
    delay: DelayRange | None = None


# =============================================================================
# Outcomes
# =============================================================================


class Payload(NamedTuple):
    """Raw result of a transport round trip."""

    data: bytes | None
    response: ResponseMetadata | None


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful result carrying a value."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    def get(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Failed result carrying the error that terminated the request."""

    error: BaseException

    @property
    def is_success(self) -> bool:
        return False

    def get(self) -> Any:
        raise self.error


Result = Success[T] | Failure
Outcome = Success[Payload] | Failure

CompletionHandler = Callable[[Outcome], None]

# =============================================================================
# Cookies
# =============================================================================


class CookieRecord(BaseModel):
    """Serialized form of a persisted session cookie.

    Required fields:
        name: Cookie name
        value: Cookie value

    Optional fields:
        domain: Cookie domain (defaults to the restore URL host)
        path: Cookie path (default: "/")
        expires: Expiry as a unix timestamp, None for session cookies
        secure: Only send over HTTPS
        http_only: Hidden from scripts
    """

    name: str = Field(min_length=1)
    value: str
    domain: str | None = None
    path: str = "/"
    expires: int | None = None
    secure: bool = False
    http_only: bool = False
