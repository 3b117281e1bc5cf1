"""Tests for the offload runner: worker dispatch, errors and supersession.

Each job runs in a real spawned worker process, so results are awaited
with a generous timeout.
"""

from __future__ import annotations

import asyncio
import threading

import pytest

from symbol_art.errors import ExecutionError, PreconditionError
from symbol_art.imaging.binarize import binarize
from symbol_art.offload import CancelledError, OffloadRunner, RenderHandle, RenderJob

TIMEOUT = 60


def _big_job() -> RenderJob:
    # Large enough that the worker is still busy when the test acts on it.
    w, h = 1500, 1500
    return RenderJob(w, h, bytes([255, 255, 255, 255]) * (w * h), ("a",), ("b",))


# ---------------------------------------------------------------------------
# Job construction
# ---------------------------------------------------------------------------


class TestRenderJob:
    def test_from_buffer_copies_plain_data(self, gray_buffer) -> None:
        binary = binarize(gray_buffer([[0, 255]]), 100)
        job = RenderJob.from_buffer(binary, "□", "■", turn=True)
        assert (job.width, job.height) == (2, 1)
        assert isinstance(job.data, bytes)
        assert job.light == ("□",)
        assert job.dark == ("■",)
        assert job.turn is True

    def test_is_frozen(self) -> None:
        job = RenderJob(0, 0, b"", ("a",), ("b",))
        with pytest.raises(AttributeError):
            job.width = 3  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class TestSubmit:
    def test_renders_in_worker(self, runner: OffloadRunner, gray_buffer) -> None:
        binary = binarize(gray_buffer([[0, 255]]), 100)
        handle = runner.submit(RenderJob.from_buffer(binary, "□", "■"))
        assert isinstance(handle, RenderHandle)
        assert handle.result(TIMEOUT) == ["■□"]
        assert handle.done()
        assert not handle.cancelled()
        assert handle.elapsed_ms > 0

    def test_turned_in_worker(self, runner: OffloadRunner, gray_buffer) -> None:
        binary = binarize(gray_buffer([[0, 255]]), 100)
        handle = runner.submit(RenderJob.from_buffer(binary, "□", "■", turn=True))
        assert handle.result(TIMEOUT) == ["■", "□"]

    def test_await_handle(self, runner: OffloadRunner, gray_buffer) -> None:
        binary = binarize(gray_buffer([[255, 255]]), 100)

        async def go():
            return await runner.submit(RenderJob.from_buffer(binary, "x", "y"))

        assert asyncio.run(go()) == ["xx"]

    def test_done_callback_receives_handle(self, runner: OffloadRunner, gray_buffer) -> None:
        seen = []
        fired = threading.Event()
        binary = binarize(gray_buffer([[0]]), 100)
        handle = runner.submit(RenderJob.from_buffer(binary, "x", "y"))

        def cb(h):
            seen.append(h)
            fired.set()

        handle.add_done_callback(cb)
        assert fired.wait(TIMEOUT)
        assert seen == [handle]

    def test_rejects_non_job(self, runner: OffloadRunner) -> None:
        with pytest.raises(TypeError):
            runner.submit({"width": 1})  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_empty_pool_surfaces_precondition(self, runner: OffloadRunner) -> None:
        handle = runner.submit(RenderJob(1, 1, bytes(4), (), ("b",)))
        with pytest.raises(PreconditionError, match="no symbols supplied"):
            handle.result(TIMEOUT)

    def test_unsendable_job_is_execution_error(self, runner: OffloadRunner) -> None:
        job = RenderJob(1, 1, bytes(4), (threading.Lock(),), ("b",))  # type: ignore[arg-type]
        handle = runner.submit(job)
        with pytest.raises(ExecutionError, match="could not send render job"):
            handle.result(TIMEOUT)

    def test_worker_crash_is_execution_error(self, runner: OffloadRunner) -> None:
        handle = runner.submit(_big_job())
        handle._process.kill()
        with pytest.raises(ExecutionError):
            handle.result(TIMEOUT)

    def test_runner_usable_after_failure(self, runner: OffloadRunner) -> None:
        bad = runner.submit(RenderJob(1, 1, bytes(4), ("a",), ()))
        with pytest.raises(PreconditionError):
            bad.result(TIMEOUT)
        good = runner.submit(RenderJob(1, 1, bytes([255] * 4), ("a",), ("b",)))
        assert good.result(TIMEOUT) == ["a"]


# ---------------------------------------------------------------------------
# Supersession
# ---------------------------------------------------------------------------


class TestCancellation:
    def test_second_submit_cancels_first(self, runner: OffloadRunner) -> None:
        first = runner.submit(_big_job())
        second = runner.submit(RenderJob(1, 1, bytes([255] * 4), ("a",), ("b",)))
        assert first.cancelled()
        with pytest.raises(CancelledError):
            first.result(TIMEOUT)
        assert second.result(TIMEOUT) == ["a"]
        assert runner.current is second

    def test_cancelled_worker_is_terminated(self, runner: OffloadRunner) -> None:
        first = runner.submit(_big_job())
        runner.submit(RenderJob(1, 1, bytes(4), ("a",), ("b",))).result(TIMEOUT)
        first._process.join(TIMEOUT)
        assert not first._process.is_alive()

    def test_resolved_handle_not_cancelled(self, runner: OffloadRunner) -> None:
        first = runner.submit(RenderJob(1, 1, bytes(4), ("a",), ("b",)))
        assert first.result(TIMEOUT) == ["b"]
        runner.submit(RenderJob(1, 1, bytes(4), ("a",), ("b",))).result(TIMEOUT)
        assert not first.cancelled()
        assert first.cancel() is False

    def test_cancelled_callback_fires(self, runner: OffloadRunner) -> None:
        states = []
        first = runner.submit(_big_job())
        first.add_done_callback(lambda h: states.append(h.cancelled()))
        runner.submit(RenderJob(1, 1, bytes(4), ("a",), ("b",))).result(TIMEOUT)
        assert states == [True]

    def test_close_cancels_current(self) -> None:
        with OffloadRunner() as r:
            handle = r.submit(_big_job())
        assert handle.cancelled()
        assert r.current is None

    def test_cancel_callback_may_submit_again(self, runner: OffloadRunner) -> None:
        follow_up = []
        finished = threading.Event()

        def resubmit(h: RenderHandle) -> None:
            if h.cancelled():
                follow_up.append(runner.submit(RenderJob(1, 1, bytes([255] * 4), ("a",), ("b",))))

        def supersede() -> None:
            runner.submit(RenderJob(1, 1, bytes(4), ("a",), ("b",)))
            finished.set()

        first = runner.submit(_big_job())
        first.add_done_callback(resubmit)
        threading.Thread(target=supersede, daemon=True).start()

        assert finished.wait(TIMEOUT), "resubmitting from a cancel callback blocked"
        assert len(follow_up) == 1
        assert follow_up[0].result(TIMEOUT) == ["a"]
        assert runner.current is follow_up[0]
