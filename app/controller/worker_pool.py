# app/controller/worker_pool.py
from __future__ import annotations
import threading
from typing import Callable, List, Optional
import structlog

from core.events.models import Event
from core.utils.queueing import DispatchQueue

log = structlog.get_logger()

class WorkerPool:
    """
    Fixed set of threads draining a DispatchQueue into a notify callback.

    Callers must stop producing before stop(): stop() closes the queue, and an
    enqueue after that is a contract violation. Stop is terminal; a fresh
    queue and pool are needed to run again.
    """
    def __init__(self, queue: DispatchQueue, notify: Callable[[Event], None], name: str = "worker"):
        self.queue = queue
        self.notify = notify
        self.name = name
        self._threads: List[threading.Thread] = []
        self._active = 0                      # completion tracker
        self._done = threading.Condition()
        self._started = False
        self._stopped = False

    @property
    def running(self) -> int:
        with self._done:
            return self._active

    def start(self, n: int) -> None:
        if n < 1:
            raise ValueError("worker count must be >= 1")
        with self._done:
            if self._started:
                raise RuntimeError("worker pool already started")
            self._started = True
            self._active += n
        for i in range(n):
            thr = threading.Thread(target=self._loop, args=(i,), name=f"{self.name}-{i}", daemon=True)
            self._threads.append(thr)
            thr.start()
        log.info("workers.start", count=n, capacity=self.queue.capacity)

    def stop(self) -> None:
        with self._done:
            if self._stopped:
                raise RuntimeError("worker pool already stopped")
            self._stopped = True
        self.queue.close()
        # no timeout: every accepted event is processed before we return
        with self._done:
            while self._active > 0:
                self._done.wait()
        for thr in self._threads:
            thr.join()
        log.info("workers.stop", count=len(self._threads))

    def _loop(self, idx: int) -> None:
        handled = 0
        try:
            while True:
                ev: Optional[Event] = self.queue.dequeue()
                if ev is None:
                    break
                try:
                    self.notify(ev)
                except Exception as e:
                    # one bad notification must not cost the rest of the queue
                    log.warning("worker.notify.error", worker=idx, fp=ev.fingerprint(), err=str(e))
                handled += 1
        finally:
            with self._done:
                self._active -= 1
                self._done.notify_all()
            log.debug("worker.exit", worker=idx, handled=handled)
