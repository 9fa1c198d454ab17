"""User-facing client and its settings.

The client owns everything the dispatch pipeline reads: the transport, the
work queues, header overrides, the default delay range and the cookie store.

Example usage:
    from insta_sdk import InstaClient
    from insta_sdk.models import ResponseModel

    class CurrentUser(ResponseModel):
        pk: int
        username: str

    with InstaClient.from_env() as client:
        client.http.set_cookies(saved_cookies)
        result = client.http.decode_sync(
            CurrentUser, "GET", "https://i.instagram.com/api/v1/accounts/current_user/"
        )
        user = result.get()
"""

import os
from collections.abc import Mapping

import httpx

from insta_sdk._internal.dispatch.client import HttpHelper
from insta_sdk._internal.dispatch.models import DelayRange
from insta_sdk._internal.http import HttpxTransport, Transport, create_http_client
from insta_sdk._internal.queues import DEFAULT_QUEUE_WORKERS, Queues
from insta_sdk.exceptions import InstaConfigError


class Settings:
    """Configuration shared by every request a client makes.

    Settings are read by the dispatch pipeline and never mutated by it.
    """

    def __init__(
        self,
        *,
        transport: Transport | None = None,
        queues: Queues | None = None,
        headers: Mapping[str, str] | None = None,
        delay: DelayRange | None = None,
        cookies: httpx.Cookies | None = None,
        debug: bool = False,
    ) -> None:
        """Initialize the settings.

        Args:
            transport: Transport issuing requests. Defaults to an
                `HttpxTransport` sharing `cookies`.
            queues: Request, working and response queues.
            headers: Header overrides applied over the default headers.
            delay: Default delay range in seconds for asynchronous requests.
            cookies: Cookie store restored sessions are installed into.
            debug: Enable debug logging to stderr.

        Raises:
            InstaConfigError: If `delay` is not an ordered, non-negative range.
        """
        if delay is not None:
            low, high = delay
            if low < 0 or low > high:
                raise InstaConfigError(f"Invalid delay range: {low}...{high}")

        if cookies is None:
            cookies = getattr(transport, "cookies", None)
            if cookies is None:
                cookies = httpx.Cookies()
        if transport is None:
            transport = HttpxTransport(create_http_client(cookies=cookies))

        self._transport = transport
        self._queues = queues or Queues.create()
        self._headers = dict(headers or {})
        self._delay = delay
        self._cookies = cookies
        self._debug = debug
        self._closed = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables.

        Optional environment variables:
            INSTA_DELAY_MIN: Lower bound of the default delay range, seconds.
            INSTA_DELAY_MAX: Upper bound of the default delay range, seconds.
            INSTA_QUEUE_WORKERS: Worker threads per queue.
            INSTA_HTTP_DEBUG: Set to "1" to enable debug logging.

        The delay range is only set when both bounds are present.

        Returns:
            Configured Settings.

        Raises:
            ValueError: If a numeric variable is malformed.
            InstaConfigError: If the delay bounds are out of order.
        """
        delay_min = os.environ.get("INSTA_DELAY_MIN")
        delay_max = os.environ.get("INSTA_DELAY_MAX")
        delay: DelayRange | None = None
        if delay_min is not None and delay_max is not None:
            delay = (float(delay_min), float(delay_max))

        workers = int(os.environ.get("INSTA_QUEUE_WORKERS", str(DEFAULT_QUEUE_WORKERS)))
        debug = os.environ.get("INSTA_HTTP_DEBUG", "") == "1"

        return cls(
            queues=Queues.create(max_workers=workers),
            delay=delay,
            debug=debug,
        )

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def queues(self) -> Queues:
        return self._queues

    @property
    def headers(self) -> dict[str, str]:
        """Copy of the header overrides."""
        return dict(self._headers)

    @property
    def delay(self) -> DelayRange | None:
        return self._delay

    @property
    def cookies(self) -> httpx.Cookies:
        return self._cookies

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop the queues and release the transport.

        Requests still pending fail with `BackReferenceReleasedError`.
        """
        self._closed = True
        self._queues.shutdown(wait=False)
        self._transport.close()


class InstaClient:
    """Client for the Instagram private API.

    Endpoint wrappers go through `client.http`, which only holds a weak
    reference back to the client: once the client is gone, pending requests
    fail with `BackReferenceReleasedError`.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or Settings()
        self.http = HttpHelper(self, debug=self._settings.debug)

    @classmethod
    def from_env(cls) -> "InstaClient":
        """Create a client configured from environment variables."""
        return cls(Settings.from_env())

    @property
    def settings(self) -> Settings:
        return self._settings

    def close(self) -> None:
        self._settings.close()

    def __enter__(self) -> "InstaClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
