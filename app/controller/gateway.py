# app/controller/gateway.py
from __future__ import annotations
import threading
import time
from typing import Optional
import structlog

from core.errors import GatewayClosedError, QueueClosedError
from core.events.codec import decode_event
from core.events.models import Event
from core.storage.event_store import EventStore
from core.utils.queueing import DispatchQueue

log = structlog.get_logger()

class IngestionGateway:
    """
    Accepts one raw payload at a time: decode -> store -> enqueue -> ack.

    Store happens before enqueue. A crash between the two leaves the event in the
    store but off the dispatch path; that window is accepted, not closed here.
    """
    def __init__(self, store: EventStore, queue: DispatchQueue):
        self.store = store
        self.queue = queue
        self._cv = threading.Condition()
        self._accepting = True
        self._in_flight = 0

    @property
    def accepting(self) -> bool:
        with self._cv:
            return self._accepting

    def submit(self, raw: bytes) -> Event:
        """
        Returns the accepted Event. Raises DecodeError for malformed input (no side
        effects) and GatewayClosedError once close() has been called. May block
        while the dispatch queue is full.
        """
        ev = decode_event(raw)
        with self._cv:
            if not self._accepting:
                raise GatewayClosedError("gateway is not accepting submissions")
            self._in_flight += 1
        try:
            self.store.store(ev)
            try:
                self.queue.enqueue(ev)
            except QueueClosedError:
                log.critical("gateway.enqueue_after_close", fp=ev.fingerprint())
                raise
            log.debug("event.accepted", fp=ev.fingerprint(), order_type=ev.order_type)
            return ev
        finally:
            with self._cv:
                self._in_flight -= 1
                self._cv.notify_all()

    def close(self, timeout: Optional[float] = None) -> bool:
        """
        Stop accepting and wait for in-flight submissions to finish.
        Returns False if some were still running when the timeout expired.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cv:
            self._accepting = False
            while self._in_flight > 0:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    log.warning("gateway.close.timeout", in_flight=self._in_flight)
                    return False
                self._cv.wait(remaining)
        log.info("gateway.closed")
        return True
