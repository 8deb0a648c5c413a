# main.py
from __future__ import annotations
import structlog
from typing import Optional

from app.config import IngestConfig
from app.logging_config import configure_logging

def serve(cfg: Optional[IngestConfig] = None) -> None:
    """Run the HTTP service until SIGINT/SIGTERM, then drain and exit."""
    import uvicorn
    from app.api.server import create_app
    from app.controller.runtime import IngestRuntime

    cfg = cfg or IngestConfig()
    runtime = IngestRuntime(cfg)
    server = uvicorn.Server(uvicorn.Config(
        create_app(runtime),
        host=cfg.host,
        port=cfg.port,
        timeout_graceful_shutdown=cfg.shutdown_grace_sec,
        log_config=None,   # keep our structlog/stdlib setup
    ))
    # uvicorn owns the signal handlers; run() returns after lifespan shutdown,
    # i.e. after the transport closed and the workers drained.
    server.run()

def main() -> None:
    cfg = IngestConfig()
    configure_logging(debug=cfg.debug, json_logs=cfg.json_logs)
    log = structlog.get_logger()

    log.info("app.start", msg="Launching order event ingest")
    serve(cfg)
    log.info("app.stop", msg="Graceful shutdown complete")

if __name__ == "__main__":
    main()
