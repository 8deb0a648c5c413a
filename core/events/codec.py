from __future__ import annotations
import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from core.errors import DecodeError
from core.events.models import WIRE_FIELDS, Event

_decoder = json.JSONDecoder()


class EventPayload(BaseModel):
    """
    Inbound JSON shape. Every field optional; absent or null -> "".
    Keys are matched case-insensitively (orderType, OrderType, ORDERTYPE ...).
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    order_type: StrictStr = Field("", alias="ordertype")
    session_id: StrictStr = Field("", alias="sessionid")
    card: StrictStr = Field("", alias="card")
    event_date: StrictStr = Field("", alias="eventdate")
    website_url: StrictStr = Field("", alias="websiteurl")

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @classmethod
    def from_object(cls, obj: Any) -> "EventPayload":
        if obj is None:
            return cls()
        if isinstance(obj, dict):
            # later keys win when two differ only by case
            obj = {str(k).lower(): v for k, v in obj.items()}
        return cls.model_validate(obj)

    def to_event(self) -> Event:
        return Event(**{attr: getattr(self, attr) for attr in WIRE_FIELDS.values()})


def _first_value(raw: bytes) -> Any:
    # only the first JSON value counts; anything after it is not read
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"body: not utf-8 ({e.reason})") from e
    text = text.lstrip(" \t\r\n")
    try:
        obj, _end = _decoder.raw_decode(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"body: invalid JSON ({e.msg} at char {e.pos})") from e
    return obj


def decode_event(raw: bytes) -> Event:
    """
    Decode the first JSON value of raw into an Event.

    - keys match case-insensitively; unknown keys are ignored
    - a bare `null` body gives an all-empty Event
    - trailing data after the first value is ignored
    - non-string field values, non-objects and invalid JSON raise DecodeError
    No format checks on field contents.
    """
    obj = _first_value(raw)
    try:
        payload = EventPayload.from_object(obj)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        where = ".".join(str(p) for p in first.get("loc", ())) or "body"
        raise DecodeError(f"{where}: {first.get('msg', 'invalid payload')}") from e
    return payload.to_event()
