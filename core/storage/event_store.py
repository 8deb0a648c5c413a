from __future__ import annotations
import threading
from typing import List

from core.events.models import Event

class EventStore:
    """
    Append-only in-memory log of accepted events.
    One lock guards both append and read; appends are O(1) so nothing finer is needed.
    No eviction: memory grows for the life of the process.
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._events: List[Event] = []

    def store(self, ev: Event) -> None:
        with self._lock:
            self._events.append(ev)

    def snapshot(self) -> List[Event]:
        with self._lock:
            return list(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
