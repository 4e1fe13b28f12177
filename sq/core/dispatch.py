"""Background dispatch for database work.

Work runs on a private single-thread QThreadPool, so jobs execute one at a
time in the order they were launched. Results come back to the thread that
owns the Dispatcher (the UI thread) through a queued signal, and only there is
the ``then`` callback invoked.
"""

from collections.abc import Callable
from typing import Any
from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot
from sq.common.logger import log


def describe_failure(label, error):
    return f"{label} failed: {error}"


class _JobSignals(QObject):
    finished = Signal(object)


class IoJob(QRunnable):
    """One unit of background work plus where its result should go."""

    def __init__(self, work: Callable[[], Any], then: Callable[[Any], None] | None, generation: int, label: str,
                 on_error: Callable[[Exception], None] | None = None):
        super().__init__()
        # The dispatcher holds a reference until delivery, Qt must not free us first.
        self.setAutoDelete(False)
        self.work = work
        self.then = then
        self.on_error = on_error
        self.generation = generation
        self.label = label
        self.result = None
        self.error = None
        self.signals = _JobSignals()

    def run(self):
        try:
            self.result = self.work()
        except Exception as e:
            self.error = e
        self.signals.finished.emit(self)


class Dispatcher(QObject):

    # Human readable description of a job that raised.
    failed = Signal(str)

    def __init__(self, pool: QThreadPool | None = None, parent=None):
        super().__init__(parent)
        if pool is None:
            pool = QThreadPool(self)
            pool.setMaxThreadCount(1)
        self._pool = pool
        self._pending = set()
        self._generation = 0

    @property
    def pool(self):
        return self._pool

    @property
    def pending(self):
        return len(self._pending)

    # Queue `work` on the pool. `then(result)` runs back on this object's thread once the work is done, or
    # `on_error(exception)` if it raised.
    def launch(self, work, then=None, label=None, on_error=None):
        job = IoJob(work, then, self._generation, label or getattr(work, "__name__", "job"), on_error)
        job.signals.finished.connect(self._finish)
        self._pending.add(job)
        self._pool.start(job)
        return job

    @Slot(object)
    def _finish(self, job):
        self._pending.discard(job)
        if job.generation != self._generation:
            log.debug(f"Dropping result of cancelled job '{job.label}'")
            return
        if job.error is not None:
            log.error(f"Background job '{job.label}' failed", exc_info=job.error)
            if job.on_error is not None:
                job.on_error(job.error)
            self.failed.emit(describe_failure(job.label, job.error))
            return
        if job.then is not None:
            job.then(job.result)

    # Throws away anything not yet started. Jobs already running finish, but their results are dropped.
    def cancel(self):
        self._generation += 1
        taken = 0
        for job in list(self._pending):
            if self._pool.tryTake(job):
                self._pending.discard(job)
                taken += 1
        log.debug(f"Cancelled dispatcher work ({taken} queued jobs dropped, {len(self._pending)} still running)")

    def wait(self, msecs=-1):
        return self._pool.waitForDone(msecs)
