"""
Ingestor - JSON ingestion API
Accepts JSON payloads on /process and stores each one as a file under DATA_LOCATION.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
import uvicorn

from ingestor.api.routes import health, process
from ingestor.core.config import Settings, get_settings
from ingestor.core.errors import ErrorKind, IngestError, error_response
from ingestor.services.ingest_service import IngestService
from ingestor.services.prometheus_metrics import metrics
from ingestor.services.storage_service import PayloadStore

load_dotenv()

logger = logging.getLogger("ingestor")
logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")


# ── Prometheus Middleware ───────────────────────────────────────────────────
class PrometheusMiddleware(BaseHTTPMiddleware):
    """Tracks HTTP request count and duration for Prometheus."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            # unhandled errors become a 500 further out, in ServerErrorMiddleware
            self._record(request, method, "500", time.time() - start_time)
            raise

        self._record(request, method, str(response.status_code), time.time() - start_time)
        return response

    @staticmethod
    def _record(request: Request, method: str, status_code: str, duration: float):
        # matched route template keeps label cardinality bounded
        route = request.scope.get("route")
        endpoint = getattr(route, "path", "unmatched")

        metrics.http_requests_total.labels(method=method, endpoint=endpoint, status_code=status_code).inc()
        metrics.http_request_duration.labels(method=method, endpoint=endpoint).observe(duration)


# ── Lifespan Management ─────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Starting ingestor | data location: %s", settings.DATA_LOCATION)
    logger.info("Server listening on port %d", settings.PORT_NUMBER)
    yield
    logger.info("Shutting down...")


# ── Exception Handlers ──────────────────────────────────────────────────────
async def ingest_exception_handler(request: Request, exc: IngestError):
    logger.error(f"[ERROR] {exc.message}")
    status_code, body = error_response(exc.kind)
    return JSONResponse(status_code=status_code, content=body)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP {exc.status_code}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"[ERROR] Unhandled exception: {exc}")
    status_code, body = error_response(ErrorKind.INTERNAL)
    return JSONResponse(status_code=status_code, content=body)


# ── FastAPI App ─────────────────────────────────────────────────────────────
def create_app(settings: Optional[Settings] = None, store: Optional[PayloadStore] = None) -> FastAPI:
    """Build the application around one immutable settings object."""
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.LOG_LEVEL.upper())

    app = FastAPI(
        title="Ingestor",
        description="Stores posted JSON payloads as files",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.ingest_service = IngestService(
        settings,
        store=store,
        logger=logging.getLogger("ingestor.process"),
    )

    if settings.ENABLE_PROMETHEUS_METRICS:
        app.add_middleware(PrometheusMiddleware)

        @app.get("/metrics", include_in_schema=False)
        async def prometheus_metrics():
            """Prometheus metrics endpoint."""
            return Response(content=metrics.render(), media_type=metrics.content_type)

    app.include_router(health.router)
    app.include_router(process.router)

    app.add_exception_handler(IngestError, ingest_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
    return app


app = create_app()


# ── Main Entry Point ────────────────────────────────────────────────────────
def run():
    settings = app.state.settings
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT_NUMBER,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
