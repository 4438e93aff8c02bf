# analytics_queue.py
# Bounded background queue for best-effort side effects (keyword analytics).
#
# submit() never blocks: when the queue is full the job is dropped with a
# warning. A single daemon worker runs jobs in order; a failing job is
# logged and the worker carries on.

import logging
import os
import queue
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

ANALYTICS_QUEUE_SIZE = int(os.getenv("ANALYTICS_QUEUE_SIZE", "256"))

_STOP = object()


class AnalyticsQueue:
    def __init__(self, maxsize: int = ANALYTICS_QUEUE_SIZE, autostart: bool = True):
        self._queue: "queue.Queue[Any]" = queue.Queue(maxsize=maxsize)
        self._worker: Optional[threading.Thread] = None
        self.dropped = 0
        self.failed = 0
        if autostart:
            self.start()

    def start(self) -> None:
        if self._worker is not None and self._worker.is_alive():
            return
        self._worker = threading.Thread(target=self._run, name="analytics-worker", daemon=True)
        self._worker.start()

    def submit(self, job: Callable[..., Any], *args: Any, **kwargs: Any) -> bool:
        try:
            self._queue.put_nowait((job, args, kwargs))
            return True
        except queue.Full:
            self.dropped += 1
            logger.warning("Analytics queue full, dropping %s", getattr(job, "__name__", job))
            return False

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                job, args, kwargs = item
                try:
                    job(*args, **kwargs)
                except Exception:
                    self.failed += 1
                    logger.warning("Analytics job %s failed", getattr(job, "__name__", job), exc_info=True)
            finally:
                self._queue.task_done()

    def join(self) -> None:
        """Block until every submitted job has run."""
        self._queue.join()

    def stop(self, timeout: float = 5.0) -> None:
        if self._worker is None:
            return
        self._queue.put(_STOP)
        self._worker.join(timeout)
        self._worker = None

    @property
    def pending(self) -> int:
        return self._queue.qsize()
