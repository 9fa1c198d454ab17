"""Request dispatch engine for the Insta SDK."""

import random
import sys
import threading
import weakref
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

import httpx

from insta_sdk._internal.dispatch.cookies import COOKIE_URL, restore_cookies
from insta_sdk._internal.dispatch.decoding import decode_outcome
from insta_sdk._internal.dispatch.models import (
    Body,
    CompletionHandler,
    DelayRange,
    Failure,
    Outcome,
    Payload,
    RequestSpec,
    Result,
    Success,
    URLSource,
)
from insta_sdk._internal.dispatch.redaction import format_headers
from insta_sdk._internal.dispatch.request import build_request, resolve_url
from insta_sdk._internal.http import ResponseMetadata, TransportCompletion
from insta_sdk._internal.queues import QueueShutdownError, WorkQueue
from insta_sdk.exceptions import BackReferenceReleasedError, InvalidURLError

if TYPE_CHECKING:
    from insta_sdk.client import Settings

T = TypeVar("T")


class SettingsProvider(Protocol):
    """Owner of the settings a `HttpHelper` reads."""

    @property
    def settings(self) -> "Settings": ...


def draw_delay(delay: DelayRange | None) -> float:
    """Draw a uniformly random delay from `delay`, or 0 when there is none."""
    if delay is None:
        return 0.0
    low, high = delay
    return random.uniform(low, high)


def _to_outcome(
    data: bytes | None,
    response: ResponseMetadata | None,
    error: BaseException | None,
) -> Outcome:
    if error is not None:
        return Failure(error)
    return Success(Payload(data, response))


class HttpHelper:
    """Builds, dispatches and decodes requests on behalf of a client.

    The helper only keeps a weak reference to its client. Every deferred step
    checks the client is still alive and fails with
    `BackReferenceReleasedError` otherwise.

    Two dispatch disciplines are available:
        - `send_async` / `decode_async` return immediately and deliver the
          result to a completion handler from one of the client's queues.
        - `send_sync` / `decode_sync` block the calling thread until the
          transport completes. Never call them from a thread the transport
          needs in order to complete.
    """

    def __init__(self, client: SettingsProvider, *, debug: bool = False) -> None:
        """Initialize the helper.

        Args:
            client: Owner of the settings. Held weakly.
            debug: Enable debug logging to stderr.
        """
        self._client_ref = weakref.ref(client)
        self._debug = debug

    @property
    def client(self) -> SettingsProvider | None:
        """The owning client, or None once it has been released."""
        return self._client_ref()

    def _settings(self) -> "Settings | None":
        client = self._client_ref()
        if client is None or client.settings.closed:
            return None
        return client.settings

    def _submit_or_fail(
        self,
        queue: WorkQueue,
        completion: Callable[[Failure], None],
        fn: Callable[..., Any],
        *args: Any,
    ) -> None:
        """Run `fn(*args)` on `queue`, failing `completion` if it has shut down."""
        try:
            queue.submit(fn, *args)
        except QueueShutdownError:
            self._log_debug(f"Queue {queue.name!r} shut down, dropping result")
            completion(Failure(BackReferenceReleasedError()))

    def _log_debug(self, message: str) -> None:
        """Log a debug message to stderr if debug mode is enabled."""
        if self._debug:
            print(f"[insta-sdk] {message}", file=sys.stderr)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def send_async(
        self,
        method: str,
        url: URLSource,
        *,
        body: Body | None = None,
        headers: Mapping[str, str] | None = None,
        delay: DelayRange | None = None,
        deliver_on_response_queue: bool = True,
        completion: CompletionHandler,
    ) -> None:
        """Fetch a resource without blocking.

        Args:
            method: HTTP method. Replaced by POST when `body` is set.
            url: URL source, resolved before anything is scheduled.
            body: Optional request body.
            headers: Extra headers, applied over every other header.
            delay: Delay range overriding the settings default.
            deliver_on_response_queue: Invoke `completion` from the response
                queue instead of the working queue.
            completion: Receives exactly one outcome.
        """
        spec = RequestSpec(
            method=method,
            url=url,
            body=body,
            headers=dict(headers or {}),
            deliver_on_response_queue=deliver_on_response_queue,
            delay=delay,
        )
        self.dispatch_async(spec, completion)

    def send_sync(
        self,
        method: str,
        url: URLSource,
        *,
        body: Body | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Outcome:
        """Fetch a resource, blocking until the transport completes.

        No delay is applied in this mode.

        Returns:
            The outcome of the request.
        """
        spec = RequestSpec(method=method, url=url, body=body, headers=dict(headers or {}))
        return self.dispatch_sync(spec)

    def dispatch_async(self, spec: RequestSpec, completion: CompletionHandler) -> None:
        """Schedule `spec` on the request queue after a jittered delay."""
        try:
            url = resolve_url(spec.url)
        except InvalidURLError as e:
            self._log_debug(f"Invalid URL: {spec.url!r}")
            return completion(Failure(e))

        settings = self._settings()
        if settings is None:
            return completion(Failure(BackReferenceReleasedError()))

        delay = draw_delay(spec.delay or settings.delay)
        self._log_debug(f"Scheduling {spec.method} {url} in {delay:.3f}s")
        settings.queues.request.submit_after(
            delay,
            self._run_async,
            spec,
            url,
            completion,
            on_rejected=lambda: completion(Failure(BackReferenceReleasedError())),
        )

    def _run_async(
        self,
        spec: RequestSpec,
        url: httpx.URL,
        completion: CompletionHandler,
    ) -> None:
        settings = self._settings()
        if settings is None:
            return completion(Failure(BackReferenceReleasedError()))

        queues = settings.queues

        def deliver(outcome: Outcome) -> None:
            if spec.deliver_on_response_queue:
                self._submit_or_fail(queues.response, completion, completion, outcome)
            else:
                completion(outcome)

        def on_complete(
            data: bytes | None,
            response: ResponseMetadata | None,
            error: BaseException | None,
        ) -> None:
            self._submit_or_fail(
                queues.working, completion, deliver, _to_outcome(data, response, error)
            )

        try:
            self._issue(spec, url, settings, on_complete)
        except Exception as e:
            self._log_debug(f"Failed to issue {spec.method} {url}: {e}")
            completion(Failure(e))

    def dispatch_sync(self, spec: RequestSpec) -> Outcome:
        """Issue `spec` and block until its single outcome is recorded."""
        try:
            url = resolve_url(spec.url)
        except InvalidURLError as e:
            self._log_debug(f"Invalid URL: {spec.url!r}")
            return Failure(e)

        settings = self._settings()
        if settings is None:
            return Failure(BackReferenceReleasedError())

        done = threading.Event()
        outcomes: list[Outcome] = []

        def on_complete(
            data: bytes | None,
            response: ResponseMetadata | None,
            error: BaseException | None,
        ) -> None:
            if not outcomes:
                outcomes.append(_to_outcome(data, response, error))
            done.set()

        try:
            self._issue(spec, url, settings, on_complete)
        except Exception as e:
            self._log_debug(f"Failed to issue {spec.method} {url}: {e}")
            return Failure(e)
        done.wait()
        return outcomes[0]

    def _issue(
        self,
        spec: RequestSpec,
        url: httpx.URL,
        settings: "Settings",
        completion: TransportCompletion,
    ) -> None:
        request = build_request(
            url,
            spec.method,
            body=spec.body,
            headers=spec.headers,
            config_headers=settings.headers,
            log=self._log_debug,
        )
        self._log_debug(f"{request.method} {request.url} [{format_headers(request.headers)}]")
        settings.transport.issue(request, completion)

    # =========================================================================
    # Decoding
    # =========================================================================

    def decode_async(
        self,
        type_: type[T] | Any,
        method: str,
        url: URLSource,
        *,
        body: Body | None = None,
        headers: Mapping[str, str] | None = None,
        validate_status: bool = True,
        deliver_on_response_queue: bool = True,
        delay: DelayRange | None = None,
        completion: Callable[[Result[T]], None],
    ) -> None:
        """Fetch a resource without blocking and decode it into `type_`.

        Args:
            type_: Target type, usually a `ResponseModel` subclass.
            method: HTTP method. Replaced by POST when `body` is set.
            url: URL source.
            body: Optional request body.
            headers: Extra headers, applied over every other header.
            validate_status: Fail unless the status code is 200.
            deliver_on_response_queue: Invoke `completion` from the response
                queue instead of the working queue.
            delay: Delay range overriding the settings default.
            completion: Receives exactly one decoded result.
        """
        spec = RequestSpec(
            method=method,
            url=url,
            body=body,
            headers=dict(headers or {}),
            validate_status=validate_status,
            deliver_on_response_queue=False,
            delay=delay,
        )

        def on_outcome(outcome: Outcome) -> None:
            settings = self._settings()
            if settings is None:
                return completion(Failure(BackReferenceReleasedError()))
            result = decode_outcome(outcome, type_, validate_status=validate_status)
            if isinstance(result, Failure):
                self._log_debug(f"Decoding {method} {spec.url} failed: {result.error}")
            if deliver_on_response_queue:
                self._submit_or_fail(settings.queues.response, completion, completion, result)
            else:
                completion(result)

        self.dispatch_async(spec, on_outcome)

    def decode_sync(
        self,
        type_: type[T] | Any,
        method: str,
        url: URLSource,
        *,
        body: Body | None = None,
        headers: Mapping[str, str] | None = None,
        validate_status: bool = True,
    ) -> Result[T]:
        """Fetch a resource, blocking, and decode it into `type_`."""
        outcome = self.send_sync(method, url, body=body, headers=headers)
        return decode_outcome(outcome, type_, validate_status=validate_status)

    # =========================================================================
    # Cookies
    # =========================================================================

    def set_cookies(self, cookies: Iterable[bytes], *, url: URLSource = COOKIE_URL) -> int:
        """Restore serialized cookies into the client's cookie store.

        Args:
            cookies: Serialized cookie records. Malformed ones are skipped.
            url: URL the cookies belong to.

        Returns:
            Number of cookies installed.

        Raises:
            BackReferenceReleasedError: If the client has been released.
            InvalidURLError: If `url` cannot be resolved.
        """
        settings = self._settings()
        if settings is None:
            raise BackReferenceReleasedError()
        installed = restore_cookies(cookies, settings.cookies, url=url, log=self._log_debug)
        self._log_debug(f"Restored {installed} cookies")
        return installed
