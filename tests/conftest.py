"""Shared fixtures for dispatch tests."""

import threading
import time

import httpx
import pytest

from insta_sdk._internal.http import ResponseMetadata
from insta_sdk._internal.queues import Queues
from insta_sdk.client import InstaClient, Settings


class FakeTransport:
    """Transport completing every request from a fresh thread.

    With `hold` set, completions are kept in `held` instead of being run.
    """

    def __init__(self) -> None:
        self.status_code = 200
        self.content: bytes | None = b'{"status": "ok"}'
        self.error: BaseException | None = None
        self.requests: list[httpx.Request] = []
        self.issued: list[tuple[httpx.Request, float]] = []
        self.completion_threads: list[str] = []
        self.cookies = httpx.Cookies()
        self.closed = False
        self.hold = False
        self.held: list = []
        self.issued_event = threading.Event()

    def issue(self, request, completion) -> None:
        self.issued.append((request, time.monotonic()))
        self.requests.append(request)
        if self.hold:
            self.held.append(completion)
            self.issued_event.set()
            return
        self.issued_event.set()
        threading.Thread(target=self._complete, args=(completion,)).start()

    def _complete(self, completion) -> None:
        self.completion_threads.append(threading.current_thread().name)
        if self.error is not None:
            completion(None, None, self.error)
        else:
            metadata = ResponseMetadata(status_code=self.status_code, headers={})
            completion(self.content, metadata, None)

    def close(self) -> None:
        self.closed = True


class Recorder:
    """Completion handler remembering what it received and where."""

    def __init__(self) -> None:
        self.results: list = []
        self.threads: list[str] = []
        self.called_at: list[float] = []
        self._event = threading.Event()

    def __call__(self, result) -> None:
        self.results.append(result)
        self.threads.append(threading.current_thread().name)
        self.called_at.append(time.monotonic())
        self._event.set()

    def wait(self, timeout: float = 5.0):
        assert self._event.wait(timeout), "completion was never invoked"
        return self.results[0]


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_recorder():
    return Recorder


@pytest.fixture
def make_client(transport):
    """Factory for clients wired to the fake transport."""
    clients: list[InstaClient] = []

    def factory(**settings_kwargs) -> InstaClient:
        settings_kwargs.setdefault("transport", transport)
        settings_kwargs.setdefault("queues", Queues.create(max_workers=2))
        client = InstaClient(Settings(**settings_kwargs))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
