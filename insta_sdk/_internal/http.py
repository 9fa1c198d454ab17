"""Shared HTTP client configuration and the default transport."""

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

import httpx
from pydantic import BaseModel, Field

DEFAULT_TIMEOUT = 30.0
DEFAULT_TRANSPORT_WORKERS = 8


class ResponseMetadata(BaseModel):
    """Status code and headers of a completed response."""

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ResponseMetadata":
        return cls(status_code=response.status_code, headers=dict(response.headers))


# Invoked exactly once per issued request with (data, metadata, error).
TransportCompletion = Callable[
    [bytes | None, ResponseMetadata | None, BaseException | None], None
]


class Transport(Protocol):
    """Anything able to issue a request and report its completion."""

    def issue(self, request: httpx.Request, completion: TransportCompletion) -> None:
        ...

    def close(self) -> None:
        ...


def create_http_client(
    *,
    timeout: float = DEFAULT_TIMEOUT,
    cookies: httpx.Cookies | None = None,
) -> httpx.Client:
    """Create configured HTTP client.

    Args:
        timeout: Request timeout in seconds.
        cookies: Optional cookie store. Its jar is shared with the client, so
            cookies restored into it are sent with later requests.

    Returns:
        Configured httpx.Client instance.
    """
    return httpx.Client(
        timeout=timeout,
        cookies=cookies.jar if cookies is not None else None,
        follow_redirects=False,
    )


class HttpxTransport:
    """Issues requests through an `httpx.Client` on a private thread pool.

    Completions are invoked from the pool's worker threads, never from the
    thread that called `issue`.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        max_workers: int = DEFAULT_TRANSPORT_WORKERS,
    ) -> None:
        self._client = client or create_http_client()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="insta-transport"
        )

    @property
    def client(self) -> httpx.Client:
        return self._client

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    def issue(self, request: httpx.Request, completion: TransportCompletion) -> None:
        """Send `request` in the background and report to `completion`."""
        self._executor.submit(self._send, request, completion)

    def _send(self, request: httpx.Request, completion: TransportCompletion) -> None:
        try:
            if "cookie" not in request.headers:
                self._client.cookies.set_cookie_header(request)
            response = self._client.send(request)
        except Exception as e:
            completion(None, None, e)
            return
        completion(response.content, ResponseMetadata.from_response(response), None)

    def close(self) -> None:
        self._executor.shutdown(wait=False)
        self._client.close()
