"""Tests for work queues."""

import threading
import time

import pytest

from insta_sdk._internal.queues import Queues, QueueShutdownError, WorkQueue


@pytest.fixture
def queue():
    work_queue = WorkQueue("test", max_workers=2)
    yield work_queue
    work_queue.shutdown()


class TestWorkQueue:
    """Tests for WorkQueue."""

    def test_runs_on_named_thread(self, queue):
        """Should run callables on the queue's worker threads."""
        future = queue.submit(lambda: threading.current_thread().name)
        assert future.result(timeout=5).startswith("insta-test")

    def test_passes_arguments(self, queue):
        """Should forward positional arguments."""
        assert queue.submit(lambda a, b: a + b, 2, 3).result(timeout=5) == 5

    def test_submit_after_waits(self, queue):
        """Should run the callable only after the delay."""
        ran = threading.Event()
        started = time.monotonic()
        queue.submit_after(0.2, ran.set)
        assert not ran.is_set()
        assert ran.wait(5)
        assert time.monotonic() - started >= 0.2

    def test_submit_after_zero_delay(self, queue):
        """Should submit immediately without a delay."""
        ran = threading.Event()
        queue.submit_after(0, ran.set)
        assert ran.wait(5)

    def test_reports_uncaught_errors(self, queue, capsys):
        """Should print errors escaping a callable to stderr."""

        def boom():
            raise RuntimeError("exploded")

        future = queue.submit(boom)
        with pytest.raises(RuntimeError):
            future.result(timeout=5)
        time.sleep(0.05)
        err = capsys.readouterr().err
        assert "Uncaught error on queue 'test'" in err
        assert "exploded" in err

    def test_submit_once_shut_down_raises(self):
        """Should refuse work once shut down."""
        work_queue = WorkQueue("closed", max_workers=1)
        work_queue.shutdown()
        with pytest.raises(QueueShutdownError, match="closed"):
            work_queue.submit(print)

    def test_submit_after_rejected_once_shut_down(self):
        """Should call on_rejected when the queue shuts down during the delay."""
        work_queue = WorkQueue("closing", max_workers=1)
        ran = threading.Event()
        rejected = threading.Event()

        work_queue.submit_after(0.2, ran.set, on_rejected=rejected.set)
        work_queue.shutdown()

        assert rejected.wait(5)
        assert not ran.is_set()

    def test_submit_after_rejected_without_delay(self):
        """Should call on_rejected on the calling thread without a delay."""
        work_queue = WorkQueue("closed", max_workers=1)
        work_queue.shutdown()
        rejected = []

        work_queue.submit_after(0, print, on_rejected=lambda: rejected.append(True))

        assert rejected == [True]


class TestQueues:
    """Tests for Queues."""

    def test_create(self):
        """Should create three independently named queues."""
        queues = Queues.create(max_workers=1)
        try:
            assert [q.name for q in (queues.request, queues.working, queues.response)] == [
                "request",
                "working",
                "response",
            ]
        finally:
            queues.shutdown()
