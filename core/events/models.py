from __future__ import annotations
from dataclasses import dataclass
from typing import Dict

from blake3 import blake3

# wire name -> attribute name
WIRE_FIELDS: Dict[str, str] = {
    "orderType": "order_type",
    "sessionId": "session_id",
    "card": "card",
    "eventDate": "event_date",
    "websiteUrl": "website_url",
}

@dataclass(frozen=True)
class Event:
    """One tracked order action. Structural equality; no identity."""
    order_type: str = ""
    session_id: str = ""
    card: str = ""          # already masked upstream, e.g. "4433**1409"
    event_date: str = ""    # string-encoded timestamp, not parsed here
    website_url: str = ""

    def to_record(self) -> Dict[str, str]:
        return {wire: getattr(self, attr) for wire, attr in WIRE_FIELDS.items()}

    @classmethod
    def from_record(cls, rec: Dict[str, str]) -> "Event":
        return cls(**{attr: rec.get(wire, "") for wire, attr in WIRE_FIELDS.items()})

    def fingerprint(self) -> str:
        # short digest so logs can correlate accept/notify without the card
        h = blake3()
        for attr in WIRE_FIELDS.values():
            h.update(getattr(self, attr).encode("utf-8"))
            h.update(b"\x1f")
        return h.hexdigest(length=8)
