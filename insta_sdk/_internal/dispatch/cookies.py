"""Restoring persisted session cookies into a cookie store."""

from collections.abc import Callable, Iterable
from http.cookiejar import Cookie

import httpx
from pydantic import ValidationError

from insta_sdk._internal.dispatch.models import CookieRecord, URLSource
from insta_sdk._internal.dispatch.request import resolve_url

COOKIE_URL = "https://www.instagram.com"


def load_cookie(blob: bytes, *, default_domain: str) -> Cookie | None:
    """Parse one serialized cookie record.

    Returns:
        The cookie, or None if `blob` is not a valid record.
    """
    try:
        record = CookieRecord.model_validate_json(blob)
    except ValidationError:
        return None
    domain = record.domain or default_domain
    return Cookie(
        version=0,
        name=record.name,
        value=record.value,
        port=None,
        port_specified=False,
        domain=domain,
        domain_specified=bool(record.domain),
        domain_initial_dot=domain.startswith("."),
        path=record.path,
        path_specified=True,
        secure=record.secure,
        expires=record.expires,
        discard=record.expires is None,
        comment=None,
        comment_url=None,
        rest={"HttpOnly": ""} if record.http_only else {},
        rfc2109=False,
    )


def dump_cookie(cookie: Cookie) -> bytes:
    """Serialize a jar cookie into the blob format `load_cookie` reads."""
    record = CookieRecord(
        name=cookie.name,
        value=cookie.value or "",
        domain=cookie.domain or None,
        path=cookie.path or "/",
        expires=cookie.expires,
        secure=cookie.secure,
        http_only=cookie.has_nonstandard_attr("HttpOnly"),
    )
    return record.model_dump_json(exclude_none=True).encode("utf-8")


def restore_cookies(
    blobs: Iterable[bytes],
    store: httpx.Cookies,
    *,
    url: URLSource = COOKIE_URL,
    log: Callable[[str], None] | None = None,
) -> int:
    """Install serialized cookies into `store`.

    Restoration is best-effort: blobs that fail to parse are skipped. The
    target URL is resolved before anything is installed.

    Args:
        blobs: Serialized cookie records.
        store: Cookie store to install into.
        url: URL the cookies belong to. Records without a domain get its host.
        log: Optional debug logger, told about skipped blobs.

    Returns:
        Number of cookies installed.

    Raises:
        InvalidURLError: If `url` cannot be resolved.
    """
    host = resolve_url(url).host
    installed = 0
    for index, blob in enumerate(blobs):
        cookie = load_cookie(blob, default_domain=host)
        if cookie is None:
            if log is not None:
                log(f"Skipping malformed cookie record #{index}")
            continue
        store.jar.set_cookie(cookie)
        installed += 1
    return installed
