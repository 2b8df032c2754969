from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from .errors import InvalidConfig


class AdmissionController:
    """Runs tasks on a bounded thread pool, tracking how many are in flight.

    One owner thread calls wait_for_slot() and submit(); worker threads
    signal completion by decrementing the counter under the same condition
    variable, so every increment is matched by exactly one decrement.
    """

    def __init__(self, max_parallel: int) -> None:
        if max_parallel < 1:
            raise InvalidConfig(f"max_parallel must be >= 1, got {max_parallel}")
        self._limit = int(max_parallel)
        self._executor = ThreadPoolExecutor(max_workers=self._limit, thread_name_prefix="scrape")

        self._lock = threading.Lock()
        self._cv = threading.Condition(self._lock)

        self._active = 0
        self._peak = 0

    def wait_for_slot(self, on_wait: Optional[Callable[[], None]] = None) -> None:
        """Block while the number of in-flight tasks is at the limit."""
        with self._cv:
            while self._active >= self._limit:
                if on_wait is not None:
                    on_wait()
                self._cv.wait()

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        """Count a new in-flight task and hand it to the pool."""
        with self._cv:
            self._active += 1
            self._peak = max(self._peak, self._active)
        try:
            return self._executor.submit(self._wrap_task, fn, *args)
        except BaseException:
            self._release()
            raise

    def _wrap_task(self, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        finally:
            self._release()

    def _release(self) -> None:
        with self._cv:
            self._active -= 1
            self._cv.notify_all()

    def drain(self) -> None:
        """Block until every submitted task has signalled completion."""
        with self._cv:
            while self._active > 0:
                self._cv.wait()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def active(self) -> int:
        with self._lock:
            return self._active

    @property
    def peak(self) -> int:
        with self._lock:
            return self._peak
