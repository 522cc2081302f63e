"""Background dispatcher for fire-and-forget notifications."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from threading import Lock
from typing import Any, Callable

from flask import Flask, current_app


class NotificationDispatcher:
    """Run notification jobs on worker threads, off the request path.

    Jobs run inside an application context. Exceptions are logged and
    dropped; nothing is retried.
    """

    def __init__(self, app: Flask | None = None):
        self._executor: ThreadPoolExecutor | None = None
        self._pending: set[Future] = set()
        self._lock = Lock()
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        workers = int(app.config.get("NOTIFY_WORKERS", 2))
        self._executor = ThreadPoolExecutor(
            max_workers=max(workers, 1), thread_name_prefix="notify"
        )
        app.extensions["notification_dispatcher"] = self

    def submit(self, job: Callable[..., Any], *args: Any, label: str = "notification") -> Future:
        """Schedule ``job(*args)`` and return immediately."""

        if self._executor is None:
            raise RuntimeError("NotificationDispatcher is not bound to an application.")

        app = current_app._get_current_object()
        future = self._executor.submit(self._run, app, job, args, label)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    @staticmethod
    def _run(app: Flask, job: Callable[..., Any], args: tuple, label: str) -> bool:
        with app.app_context():
            try:
                job(*args)
            except Exception:  # noqa: BLE001 - failures never reach the caller
                app.logger.exception("Error sending %s", label)
                return False
        return True

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def wait(self, timeout: float | None = 10) -> None:
        """Block until every job scheduled so far has finished."""

        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
