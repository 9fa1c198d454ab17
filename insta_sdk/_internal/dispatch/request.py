"""Construction of outbound requests."""

from collections.abc import Callable, Mapping

import httpx

from insta_sdk._internal.dispatch.body import encode_body
from insta_sdk._internal.dispatch.models import POST, Body, URLSource
from insta_sdk._internal.http import DEFAULT_TIMEOUT
from insta_sdk.exceptions import InvalidURLError

# =============================================================================
# Default Headers
# =============================================================================

ACCEPT_LANGUAGE_KEY = "Accept-Language"
ACCEPT_LANGUAGE_VALUE = "en-US"
IG_CAPABILITIES_KEY = "X-IG-Capabilities"
IG_CAPABILITIES_VALUE = "3brTvw=="
IG_CONNECTION_TYPE_KEY = "X-IG-Connection-Type"
IG_CONNECTION_TYPE_VALUE = "WIFI"
CONTENT_TYPE_KEY = "Content-Type"
CONTENT_TYPE_FORM_VALUE = "application/x-www-form-urlencoded; charset=UTF-8"
USER_AGENT_KEY = "User-Agent"
USER_AGENT_VALUE = (
    "Instagram 85.0.0.21.100 Android "
    "(21/5.0.2; 480dpi; 1080x1776; Sony; C6603; C6603; qcom; en_US; 146536611)"
)

DEFAULT_HEADERS: dict[str, str] = {
    ACCEPT_LANGUAGE_KEY: ACCEPT_LANGUAGE_VALUE,
    IG_CAPABILITIES_KEY: IG_CAPABILITIES_VALUE,
    IG_CONNECTION_TYPE_KEY: IG_CONNECTION_TYPE_VALUE,
    CONTENT_TYPE_KEY: CONTENT_TYPE_FORM_VALUE,
    USER_AGENT_KEY: USER_AGENT_VALUE,
}


def resolve_url(source: URLSource) -> httpx.URL:
    """Resolve a URL source into an absolute URL.

    Args:
        source: A URL string, an `httpx.URL`, a zero-argument callable
            returning either, or the exception a previous resolution raised.

    Returns:
        The resolved absolute URL.

    Raises:
        InvalidURLError: If the source is an exception, the callable raises,
            or the result is not an absolute http(s) URL.
    """
    if isinstance(source, BaseException):
        raise InvalidURLError(url=source) from source
    try:
        value = source() if callable(source) else source
        url = httpx.URL(value)
    except Exception as e:
        raise InvalidURLError(url=source) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidURLError(url=source)
    return url


def effective_method(method: str, body: Body | None) -> str:
    """Return POST when a body is present, the caller's method otherwise."""
    return POST if body is not None else method.upper()


def build_request(
    url: httpx.URL,
    method: str,
    *,
    body: Body | None = None,
    headers: Mapping[str, str] | None = None,
    config_headers: Mapping[str, str] | None = None,
    log: Callable[[str], None] | None = None,
) -> httpx.Request:
    """Build a fully formed request.

    Headers are layered defaults, then configuration overrides, then body
    encoding headers, then `headers`. Later layers replace earlier values
    for the same (case-insensitive) name.

    Args:
        url: Resolved request URL.
        method: Method requested by the caller.
        body: Optional body. Forces the method to POST.
        headers: Per-call extra headers.
        config_headers: Header overrides from the client settings.
        log: Optional debug logger passed to the body encoder.

    Returns:
        The request, with a fixed 30 second timeout.
    """
    merged = httpx.Headers(DEFAULT_HEADERS)
    for key, value in (config_headers or {}).items():
        merged[key] = value
    encoded = encode_body(body, log=log)
    for key, value in encoded.headers.items():
        merged[key] = value
    for key, value in (headers or {}).items():
        merged[key] = value

    return httpx.Request(
        effective_method(method, body),
        url,
        headers=merged,
        content=encoded.content,
        extensions={"timeout": httpx.Timeout(DEFAULT_TIMEOUT).as_dict()},
    )
