# tests/test_dispatch_queue.py
# What this covers:
#   - FIFO delivery among queued events
#   - enqueue blocks while full and resumes when a consumer frees a slot
#   - close: queued events still drain, then dequeue returns None
#   - enqueue after close (and a second close) raise QueueClosedError
#   - a producer blocked on a full queue fails when the queue is closed

import threading

import pytest

from core.errors import QueueClosedError
from core.events.models import Event
from core.utils.queueing import DispatchQueue


def _ev(i):
    return Event(order_type="Purchase", session_id=str(i))


def test_fifo_order():
    q = DispatchQueue(capacity=10)
    for i in range(5):
        q.enqueue(_ev(i))
    assert len(q) == 5
    assert [q.dequeue().session_id for _ in range(5)] == ["0", "1", "2", "3", "4"]


def test_enqueue_blocks_when_full():
    q = DispatchQueue(capacity=2)
    q.enqueue(_ev(0))
    q.enqueue(_ev(1))

    done = threading.Event()

    def producer():
        q.enqueue(_ev(2))
        done.set()

    t = threading.Thread(target=producer, daemon=True)
    t.start()
    assert not done.wait(0.2), "enqueue on a full queue should block"

    assert q.dequeue() == _ev(0)
    assert done.wait(2.0)
    t.join(2.0)
    assert len(q) == 2


def test_dequeue_blocks_until_enqueue():
    q = DispatchQueue(capacity=1)
    got = []
    t = threading.Thread(target=lambda: got.append(q.dequeue()), daemon=True)
    t.start()
    t.join(0.1)
    assert t.is_alive()
    q.enqueue(_ev(7))
    t.join(2.0)
    assert got == [_ev(7)]


def test_close_drains_then_signals_end():
    q = DispatchQueue(capacity=5)
    q.enqueue(_ev(0))
    q.enqueue(_ev(1))
    q.close()
    assert q.closed
    assert q.dequeue() == _ev(0)
    assert q.dequeue() == _ev(1)
    assert q.dequeue() is None
    assert q.dequeue() is None


def test_close_wakes_idle_consumers():
    q = DispatchQueue(capacity=5)
    results = []
    lock = threading.Lock()

    def consumer():
        r = q.dequeue()
        with lock:
            results.append(r)

    threads = [threading.Thread(target=consumer, daemon=True) for _ in range(3)]
    for t in threads:
        t.start()
    q.close()
    for t in threads:
        t.join(2.0)
        assert not t.is_alive()
    assert results == [None, None, None]


def test_enqueue_after_close_is_fatal():
    q = DispatchQueue(capacity=5)
    q.close()
    with pytest.raises(QueueClosedError):
        q.enqueue(_ev(0))


def test_second_close_raises():
    q = DispatchQueue()
    q.close()
    with pytest.raises(QueueClosedError):
        q.close()


def test_blocked_producer_fails_on_close():
    q = DispatchQueue(capacity=1)
    q.enqueue(_ev(0))
    errors = []

    def producer():
        try:
            q.enqueue(_ev(1))
        except QueueClosedError as e:
            errors.append(e)

    t = threading.Thread(target=producer, daemon=True)
    t.start()
    t.join(0.1)
    q.close()
    t.join(2.0)
    assert len(errors) == 1
    # the event that was already queued is still delivered
    assert q.dequeue() == _ev(0)
    assert q.dequeue() is None


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        DispatchQueue(capacity=0)
