import json

import pytest

from core.events.models import Event

SAMPLE_EVENTS = [
    Event(
        order_type="Purchase",
        session_id="29827525-06c9-4b1e-9d9b-7c4584e82f56",
        card="4433**1409",
        event_date="2023-01-04 13:44:52.835626 +00:00",
        website_url="https://amazon.com",
    ),
    Event(
        order_type="CardVerify",
        session_id="500cf308-e666-4639-aa9f-f6376015d1b4",
        card="4433**1409",
        event_date="2023-04-07 05:29:54.362216 +00:00",
        website_url="https://adidas.com",
    ),
    Event(
        order_type="SendOtp",
        session_id="500cf308-e666-4639-aa9f-f6376015d1b4",
        card="4433**1409",
        event_date="2023-04-06 22:52:34.930150 +00:00",
        website_url="https://somon.tj",
    ),
]


@pytest.fixture
def sample_events():
    return list(SAMPLE_EVENTS)


@pytest.fixture
def encode():
    def _encode(ev: Event) -> bytes:
        return json.dumps(ev.to_record()).encode("utf-8")
    return _encode
