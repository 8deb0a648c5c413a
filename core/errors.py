from __future__ import annotations


class IngestError(Exception):
    """Base class for ingestion pipeline errors."""


class DecodeError(IngestError):
    """Payload could not be decoded into an Event (client fault)."""


class GatewayClosedError(IngestError):
    """Submission attempted after the gateway stopped accepting."""


class QueueClosedError(IngestError):
    """
    Enqueue (or a second close) on a closed dispatch queue.
    Means the shutdown ordering was broken by the caller; not recoverable.
    """
