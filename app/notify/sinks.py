# app/notify/sinks.py
from __future__ import annotations
import threading
from typing import List, Protocol, runtime_checkable
import structlog

from core.events.models import Event

log = structlog.get_logger()

@runtime_checkable
class Notifier(Protocol):
    """Called once per accepted event, concurrently from several worker threads."""
    def __call__(self, ev: Event) -> None: ...

class LogNotifier:
    """
    Default sink: one structured log line per event (structlog is thread-safe).
    The card is never logged; the fingerprint stands in for it.
    """
    def __init__(self, event_name: str = "event.notified"):
        self.event_name = event_name

    def __call__(self, ev: Event) -> None:
        rec = ev.to_record()
        rec.pop("card", None)
        log.info(self.event_name, fp=ev.fingerprint(), **rec)

class CollectingNotifier:
    """Keeps every notified event; used by replay summaries and tests."""
    def __init__(self):
        self._lock = threading.Lock()
        self._events: List[Event] = []

    def __call__(self, ev: Event) -> None:
        with self._lock:
            self._events.append(ev)

    @property
    def events(self) -> List[Event]:
        with self._lock:
            return list(self._events)

class FanoutNotifier:
    """Calls each sink in turn; a failing sink is logged and the rest still run."""
    def __init__(self, *sinks: Notifier):
        self.sinks = sinks

    def __call__(self, ev: Event) -> None:
        for sink in self.sinks:
            try:
                sink(ev)
            except Exception as e:
                log.warning("notify.sink.error", sink=type(sink).__name__, fp=ev.fingerprint(), err=str(e))
