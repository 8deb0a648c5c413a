from __future__ import annotations
from dataclasses import dataclass

@dataclass(frozen=True)
class IngestConfig:
    # transport
    host: str = "0.0.0.0"
    port: int = 8080
    shutdown_grace_sec: float = 1.0   # how long in-flight requests get on shutdown

    # pipeline
    queue_capacity: int = 100
    workers: int = 3

    debug: bool = False
    json_logs: bool = True            # False -> human-readable console lines

    def __post_init__(self):
        if self.queue_capacity < 1:
            raise ValueError("queue_capacity must be >= 1")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        if self.shutdown_grace_sec < 0:
            raise ValueError("shutdown_grace_sec must be >= 0")
