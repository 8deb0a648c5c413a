# app/controller/runtime.py
from __future__ import annotations
from typing import Optional
import structlog

from app.config import IngestConfig
from app.controller.gateway import IngestionGateway
from app.controller.worker_pool import WorkerPool
from app.notify.sinks import LogNotifier, Notifier
from core.events.models import Event
from core.storage.event_store import EventStore
from core.utils.queueing import DispatchQueue

log = structlog.get_logger()

class IngestRuntime:
    """
    Owns store, dispatch queue, worker pool and gateway for one process run.
    Shutdown order is fixed: gateway closes first, then workers drain.
    """
    def __init__(self, config: Optional[IngestConfig] = None, notify: Optional[Notifier] = None):
        self.cfg = config or IngestConfig()
        self.notify = notify or LogNotifier()
        self.store = EventStore()
        self.queue = DispatchQueue(capacity=self.cfg.queue_capacity)
        self.pool = WorkerPool(self.queue, self.notify)
        self.gateway = IngestionGateway(self.store, self.queue)

    def start_workers(self, n: Optional[int] = None) -> None:
        self.pool.start(n or self.cfg.workers)

    def stop_workers(self) -> None:
        log.info("workers.stopping", queued=len(self.queue))
        self.pool.stop()

    def submit(self, raw: bytes) -> Event:
        return self.gateway.submit(raw)

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Stop accepting, then drain. Safe to call only once."""
        if not self.gateway.close(timeout=timeout):
            # stragglers will hit a closed queue; that is reported, not waited on
            log.warning("shutdown.in_flight_abandoned")
        self.stop_workers()
        log.info("shutdown.complete", stored=len(self.store))
