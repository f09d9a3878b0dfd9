"""Fixed-size pool of worker threads consuming a FIFO task queue."""

from __future__ import annotations

import threading
from collections import deque
from concurrent.futures import Future
from typing import Any, Callable

from hearthweb.logger import get_logger


class ThreadPool:
    """Runs submitted callables on a fixed number of worker threads.

    On shutdown the workers finish every task already queued before exiting.
    """

    def __init__(self, threads: int) -> None:
        if threads < 0:
            raise ValueError("thread count must not be negative")
        get_logger().info(f"Creating ThreadPool with {threads} threads")
        self._tasks: deque[tuple[Future, Callable[..., Any], tuple, dict]] = deque()
        self._condition = threading.Condition()
        self._stopped = False
        self._active = 0
        self._workers = [
            threading.Thread(target=self._work, name=f"pool-worker-{i}", daemon=True)
            for i in range(threads)
        ]
        for worker in self._workers:
            worker.start()

    @property
    def thread_count(self) -> int:
        return len(self._workers)

    @property
    def active_count(self) -> int:
        """Number of tasks currently running."""
        with self._condition:
            return self._active

    @property
    def queue_size(self) -> int:
        """Number of tasks waiting for a worker."""
        with self._condition:
            return len(self._tasks)

    def enqueue(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue ``func(*args, **kwargs)`` and return a future for its result."""
        future: Future = Future()
        with self._condition:
            if self._stopped:
                raise RuntimeError("enqueue on stopped ThreadPool")
            self._tasks.append((future, func, args, kwargs))
            self._condition.notify()
        return future

    def _work(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._stopped or bool(self._tasks))
                if self._stopped and not self._tasks:
                    return
                future, func, args, kwargs = self._tasks.popleft()
                self._active += 1
            try:
                if future.set_running_or_notify_cancel():
                    try:
                        result = func(*args, **kwargs)
                    except Exception as exc:
                        future.set_exception(exc)
                    else:
                        future.set_result(result)
            finally:
                with self._condition:
                    self._active -= 1

    def shutdown(self) -> None:
        """Stop accepting tasks, let queued ones finish and join the workers."""
        logger = get_logger()
        with self._condition:
            first = not self._stopped
            if first:
                logger.info("Destroying ThreadPool")
                logger.debug("Setting stop flag and notifying workers")
            self._stopped = True
            self._condition.notify_all()
        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()
        if first:
            logger.info("ThreadPool destroyed")

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()