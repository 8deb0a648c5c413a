from __future__ import annotations
import logging
import sys
import structlog

def configure_logging(debug: bool = False, json_logs: bool = True) -> None:
    """
    One structlog pipeline for the service; uvicorn's stdlib loggers share the stream.
    json_logs=False switches to the console renderer for local runs.
    """
    level = logging.DEBUG if debug else logging.INFO
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

    # force: uvicorn may already have attached its own handlers
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    # one line per request is noise next to event.notified; keep it for debug runs
    logging.getLogger("uvicorn.access").setLevel(level if debug else logging.WARNING)
