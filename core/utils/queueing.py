# core/utils/queueing.py
from __future__ import annotations
import threading
from collections import deque
from typing import Deque, Optional

from core.errors import QueueClosedError
from core.events.models import Event

class DispatchQueue:
    """
    Bounded FIFO shared by producers (submissions) and consumers (workers).
    - enqueue blocks while full (backpressure goes to the caller)
    - close is one-way; queued events stay drainable after it
    - dequeue returns None once closed AND empty, so consumers can exit
    """
    def __init__(self, capacity: int = 100):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._items: Deque[Event] = deque()
        self._closed = False
        self._mutex = threading.Lock()
        self._not_full = threading.Condition(self._mutex)
        self._not_empty = threading.Condition(self._mutex)

    @property
    def closed(self) -> bool:
        with self._mutex:
            return self._closed

    def __len__(self) -> int:
        with self._mutex:
            return len(self._items)

    def enqueue(self, ev: Event) -> None:
        with self._not_full:
            while not self._closed and len(self._items) >= self.capacity:
                self._not_full.wait()
            if self._closed:
                raise QueueClosedError("enqueue on closed dispatch queue")
            self._items.append(ev)
            self._not_empty.notify()

    def dequeue(self) -> Optional[Event]:
        with self._not_empty:
            while not self._items and not self._closed:
                self._not_empty.wait()
            if not self._items:
                return None  # closed and drained
            ev = self._items.popleft()
            self._not_full.notify()
            return ev

    def close(self) -> None:
        with self._mutex:
            if self._closed:
                raise QueueClosedError("dispatch queue already closed")
            self._closed = True
            # wake every waiter: consumers re-check drained, blocked producers fail
            self._not_empty.notify_all()
            self._not_full.notify_all()
