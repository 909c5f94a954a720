"""Fixed-size pool of worker threads draining a shared task queue."""

from __future__ import annotations

import threading
from collections import deque
from typing import Callable


class ThreadPool:
    """Runs submitted callables on a fixed set of worker threads.

    Exceptions raised by tasks are kept in ``errors``; the worker carries on.
    """

    def __init__(self, num_threads: int) -> None:
        self._count = num_threads
        self._lock = threading.Lock()
        self._task_available = threading.Condition(self._lock)
        self._all_done = threading.Condition(self._lock)
        self._tasks: deque[Callable[[], object]] = deque()
        self._pending = 0
        self._stopping = False
        self.errors: list[BaseException] = []
        self._workers = [
            threading.Thread(target=self._work, daemon=True) for _ in range(num_threads)
        ]
        for worker in self._workers:
            worker.start()

    def _work(self) -> None:
        while True:
            with self._lock:
                self._task_available.wait_for(lambda: self._stopping or bool(self._tasks))
                if self._stopping and not self._tasks:
                    return
                task = self._tasks.popleft()
                self._pending += 1
            try:
                task()
            except Exception as exc:
                with self._lock:
                    self.errors.append(exc)
            finally:
                with self._lock:
                    self._pending -= 1
                    self._all_done.notify_all()

    def submit(self, task: Callable[[], object]) -> None:
        """Queue ``task``; raises RuntimeError once the pool is stopped."""
        with self._lock:
            if self._stopping:
                raise RuntimeError("submit on stopped ThreadPool")
            self._tasks.append(task)
            self._task_available.notify()

    def stop(self) -> None:
        """Finish the queued tasks, then end the workers."""
        with self._lock:
            self._stopping = True
            self._task_available.notify_all()
        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()

    def wait_all(self) -> None:
        """Block until the queue is empty and no task is running."""
        with self._lock:
            self._all_done.wait_for(lambda: self._pending == 0 and not self._tasks)

    def num_threads(self) -> int:
        return self._count

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()