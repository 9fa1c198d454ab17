"""Work queues backing the dispatch pipeline."""

import sys
import threading
import traceback
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

DEFAULT_QUEUE_WORKERS = 4


class QueueShutdownError(RuntimeError):
    """Work was submitted to a queue that has been shut down."""


class WorkQueue:
    """A named FIFO work queue served by a thread pool.

    Callables submitted here run on one of the queue's worker threads.
    Exceptions escaping a callable are printed to stderr, the same way an
    uncaught exception in a plain thread would be.
    """

    def __init__(self, name: str, *, max_workers: int = DEFAULT_QUEUE_WORKERS) -> None:
        self._name = name
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=f"insta-{name}"
        )

    @property
    def name(self) -> str:
        return self._name

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future[Any]:
        """Run `fn(*args)` on the queue.

        Raises:
            QueueShutdownError: If the queue has been shut down.
        """
        try:
            future = self._executor.submit(fn, *args)
        except RuntimeError as e:
            raise QueueShutdownError(f"Queue {self._name!r} has been shut down") from e
        future.add_done_callback(self._report)
        return future

    def submit_after(
        self,
        delay: float,
        fn: Callable[..., Any],
        *args: Any,
        on_rejected: Callable[[], None] | None = None,
    ) -> None:
        """Run `fn(*args)` on the queue once `delay` seconds have elapsed.

        Never blocks the calling thread.

        Args:
            delay: Seconds to wait before submitting.
            fn: Callable to run.
            *args: Arguments for `fn`.
            on_rejected: Called instead of `fn` if the queue has been shut
                down by the time the delay elapses. Without it the
                `QueueShutdownError` propagates.
        """
        if delay <= 0:
            self._submit_or_reject(fn, args, on_rejected)
            return
        timer = threading.Timer(delay, self._submit_or_reject, args=(fn, args, on_rejected))
        timer.daemon = True
        timer.start()

    def _submit_or_reject(
        self,
        fn: Callable[..., Any],
        args: tuple[Any, ...],
        on_rejected: Callable[[], None] | None,
    ) -> None:
        try:
            self.submit(fn, *args)
        except QueueShutdownError:
            if on_rejected is None:
                raise
            on_rejected()

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _report(self, future: Future[Any]) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            print(f"[insta-sdk] Uncaught error on queue {self._name!r}:", file=sys.stderr)
            traceback.print_exception(error, file=sys.stderr)


@dataclass
class Queues:
    """The three queues a request moves through.

    Attributes:
        request: Runs deferred request building and issuing.
        working: Receives transport completions.
        response: Delivers final results to callers who asked for it.
    """

    request: WorkQueue
    working: WorkQueue
    response: WorkQueue

    @classmethod
    def create(cls, *, max_workers: int = DEFAULT_QUEUE_WORKERS) -> "Queues":
        return cls(
            request=WorkQueue("request", max_workers=max_workers),
            working=WorkQueue("working", max_workers=max_workers),
            response=WorkQueue("response", max_workers=max_workers),
        )

    def shutdown(self, *, wait: bool = True) -> None:
        for queue in (self.request, self.working, self.response):
            queue.shutdown(wait=wait)
