#!/usr/bin/env python3
# symbol_art/offload.py
"""
Run the symbol renderer in a separate worker process.

- ``OffloadRunner.submit(job)`` starts one worker process per job and
  returns a ``RenderHandle`` at once.
- The runner owns a single slot for the current handle. Submitting again
  first cancels the previous handle (its worker is terminated and whatever
  it would have produced is dropped), then dispatches the new job.
- The job is plain data and is pickled through a pipe, so the worker never
  sees caller memory.
- A monitor thread per handle waits for the worker's reply and resolves the
  handle. A worker that dies without replying resolves it with
  ExecutionError, so callers are never left waiting forever.
"""

from __future__ import annotations

import asyncio
import logging
import multiprocessing
import threading
import time
from concurrent.futures import CancelledError, Future, InvalidStateError
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from symbol_art.errors import ExecutionError, PreconditionError
from symbol_art.imaging.pixel_buffer import PixelBuffer
from symbol_art.rendering.renderer import render_symbols
from symbol_art.rendering.symbols import PoolLike, SymbolPool, to_pool

__all__ = [
    "RenderJob",
    "RenderHandle",
    "OffloadRunner",
    "CancelledError",
]

log = logging.getLogger(__name__)

_JOIN_TIMEOUT_S = 1.0


@dataclass(frozen=True)
class RenderJob:
    """Everything the worker needs, as plain picklable values."""
    width: int
    height: int
    data: bytes
    light: SymbolPool
    dark: SymbolPool
    turn: bool = False

    @classmethod
    def from_buffer(cls, binary: PixelBuffer, light: PoolLike, dark: PoolLike, turn: bool = False) -> "RenderJob":
        w, h = binary.size()
        return cls(w, h, binary.tobytes(), to_pool(light), to_pool(dark), bool(turn))


def _worker_main(conn) -> None:
    """Worker process entry: receive one job, reply with one message."""
    try:
        job = conn.recv()
    except EOFError:
        return
    try:
        lines = render_symbols(job.width, job.height, job.data, job.light, job.dark, job.turn)
    except PreconditionError as e:
        reply: Tuple[str, object] = ("precondition", str(e))
    except Exception as e:
        reply = ("error", f"{type(e).__name__}: {e}")
    else:
        reply = ("ok", lines)
    try:
        conn.send(reply)
    finally:
        conn.close()


class RenderHandle:
    """
    Pending result of one submitted job.

    Resolves to the list of rows, raises the renderer's PreconditionError,
    raises ExecutionError when the worker crashed or the job could not be
    sent, or raises CancelledError once superseded.
    """

    def __init__(self, job_id: int, job: RenderJob, ctx):
        self.job_id = job_id
        self._job = job
        self._ctx = ctx
        self._future: Future = Future()
        self._lock = threading.Lock()
        self._process = None
        self._conn = None
        self._started_at = 0.0
        self.elapsed_ms = 0.0

    # -------------
    # Lifecycle
    # -------------

    def _start(self) -> None:
        parent_conn, child_conn = self._ctx.Pipe()
        process = self._ctx.Process(
            target=_worker_main,
            args=(child_conn,),
            name=f"symbol-art-render-{self.job_id}",
            daemon=True,
        )
        with self._lock:
            if self._future.done():
                parent_conn.close()
                child_conn.close()
                return
            self._conn = parent_conn
            self._process = process
            self._started_at = time.monotonic()
            try:
                process.start()
            except Exception as e:
                failure = ExecutionError(f"could not start render worker: {e}")
                parent_conn.close()
            else:
                failure = None
            finally:
                # Parent keeps only its own end so a dead worker reads as EOF.
                child_conn.close()
        if failure is not None:
            self._resolve(error=failure)
            return

        log.debug("Render #%d started in pid %s", self.job_id, process.pid)
        threading.Thread(
            target=self._monitor,
            name=f"symbol-art-monitor-{self.job_id}",
            daemon=True,
        ).start()

    def _monitor(self) -> None:
        conn = self._conn
        try:
            try:
                conn.send(self._job)
            except Exception as e:
                self._resolve(error=ExecutionError(f"could not send render job: {e}"))
                self._kill()
                return

            try:
                status, payload = conn.recv()
            except (EOFError, OSError):
                status, payload = None, None
        finally:
            conn.close()

        self._process.join(_JOIN_TIMEOUT_S)
        if status == "ok":
            self._resolve(result=payload)
        elif status == "precondition":
            self._resolve(error=PreconditionError(payload))
        elif status == "error":
            self._resolve(error=ExecutionError(f"render worker failed: {payload}"))
        else:
            self._resolve(error=ExecutionError(
                f"render worker exited without a result (exit code {self._process.exitcode})"
            ))

    def _resolve(self, result=None, error: Optional[BaseException] = None) -> None:
        # Runs without holding any lock: the future invokes done-callbacks
        # synchronously and those may submit again.
        if self._future.done():
            return
        self.elapsed_ms = (time.monotonic() - self._started_at) * 1000.0
        try:
            if error is not None:
                self._future.set_exception(error)
            else:
                self._future.set_result(result)
        except InvalidStateError:
            # Cancelled meanwhile; the late result is discarded.
            return
        if error is not None:
            log.info("Render #%d failed: %s", self.job_id, error)
        else:
            log.info("Render #%d done: %d rows in %.1f ms", self.job_id, len(result), self.elapsed_ms)

    def _kill(self) -> None:
        p = self._process
        if p is not None and p.is_alive():
            p.terminate()

    # -------------
    # Public API
    # -------------

    def cancel(self) -> bool:
        """Cancel the run and terminate its worker. False if already resolved."""
        if not self._future.cancel():
            return False
        log.info("Render #%d cancelled", self.job_id)
        with self._lock:
            # Waits for a concurrent _start so the new worker is seen.
            self._kill()
        return True

    def done(self) -> bool:
        return self._future.done()

    def cancelled(self) -> bool:
        return self._future.cancelled()

    def result(self, timeout: Optional[float] = None) -> List[str]:
        return self._future.result(timeout)

    def exception(self, timeout: Optional[float] = None) -> Optional[BaseException]:
        return self._future.exception(timeout)

    def add_done_callback(self, fn: Callable[["RenderHandle"], None]) -> None:
        self._future.add_done_callback(lambda _f: fn(self))

    def __await__(self):
        return asyncio.wrap_future(self._future).__await__()

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled() else ("done" if self.done() else "pending")
        return f"<RenderHandle #{self.job_id} {state}>"


class OffloadRunner:
    """
    Dispatches render jobs to worker processes, keeping at most one current.
    """

    def __init__(self, mp_context=None):
        if mp_context is None or isinstance(mp_context, str):
            mp_context = multiprocessing.get_context(mp_context or "spawn")
        self._ctx = mp_context
        self._lock = threading.Lock()
        self._current: Optional[RenderHandle] = None
        self._seq = 0

    @property
    def current(self) -> Optional[RenderHandle]:
        return self._current

    def submit(self, job: RenderJob) -> RenderHandle:
        if not isinstance(job, RenderJob):
            raise TypeError(f"expected RenderJob, got {type(job).__name__}")
        with self._lock:
            prev = self._current
            self._seq += 1
            handle = RenderHandle(self._seq, job, self._ctx)
            self._current = handle
        # Outside the runner lock: cancel callbacks may submit again.
        if prev is not None and not prev.done():
            prev.cancel()
        log.info("Render #%d submitted: %dx%d turn=%s", handle.job_id, job.width, job.height, job.turn)
        handle._start()
        return handle

    def close(self) -> None:
        with self._lock:
            prev, self._current = self._current, None
        if prev is not None:
            prev.cancel()

    def __enter__(self) -> "OffloadRunner":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
