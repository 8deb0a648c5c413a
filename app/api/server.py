"""
HTTP transport for the ingestion pipeline.

    POST /events   one JSON event -> 201 | 400 | 503
    GET  /events   inspection snapshot of the store
    GET  /health   queue depth, stored count, live workers

The app's lifespan drives the runtime: workers start on startup, and the
gateway close + worker drain run on shutdown, which uvicorn only reaches after
it has stopped accepting connections and finished (or timed out) open requests.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.controller.runtime import IngestRuntime
from core.errors import DecodeError, GatewayClosedError

log = structlog.get_logger()


def register_exception_handlers(app: FastAPI) -> None:
    """Maps pipeline errors to HTTP responses."""

    @app.exception_handler(DecodeError)
    async def decode_error_handler(request: Request, exc: DecodeError):
        log.info("gateway.reject", path=request.url.path, err=str(exc))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "bad_request", "detail": str(exc)},
        )

    @app.exception_handler(GatewayClosedError)
    async def gateway_closed_handler(request: Request, exc: GatewayClosedError):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "service_unavailable", "detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        log.error("http.unhandled", method=request.method, path=request.url.path, err=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "internal_server_error", "detail": "internal server error"},
        )


def create_app(runtime: IngestRuntime) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        runtime.start_workers()
        log.info("server.start", host=runtime.cfg.host, port=runtime.cfg.port)
        yield
        # transport is already closed here; drain off the event loop
        await run_in_threadpool(runtime.shutdown, runtime.cfg.shutdown_grace_sec)

    app = FastAPI(title="Order Event Ingest", version="0.1.0", lifespan=lifespan)
    register_exception_handlers(app)

    async def submit_event(request: Request) -> Response:
        raw = await request.body()
        # submit may block on a full queue: keep it off the event loop
        await run_in_threadpool(runtime.submit, raw)
        return Response(status_code=status.HTTP_201_CREATED)

    app.add_api_route("/events", submit_event, methods=["POST"], status_code=201)
    app.add_api_route("/", submit_event, methods=["POST"], status_code=201, include_in_schema=False)

    @app.get("/events")
    async def list_events():
        return {"events": [ev.to_record() for ev in runtime.store.snapshot()]}

    @app.get("/health")
    async def health_check():
        return {
            "status": "ok" if runtime.gateway.accepting else "draining",
            "queued": len(runtime.queue),
            "stored": len(runtime.store),
            "workers": runtime.pool.running,
        }

    return app
