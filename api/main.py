from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from snapshots.errors import AggregationError, MalformedSnapshotError, StorageUnavailableError
from snapshots.settings import get_settings
from snapshots.utils.logging import configure_logging, get_logger

from .database import init_db
from .models import ErrorResponse
from .routes import router

logger = get_logger(__name__)


def _error(status_code: int, exc: Exception, fields: list[str] | None = None) -> JSONResponse:
    body = ErrorResponse(error=str(exc), fields=fields or [])
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, json_enabled=settings.log_json)
    init_db()

    app = FastAPI(title="Twitter Trends API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    @app.exception_handler(MalformedSnapshotError)
    async def _malformed_snapshot(request: Request, exc: MalformedSnapshotError) -> JSONResponse:
        logger.warning("ingest.malformed", extra={"fields": exc.fields})
        return _error(422, exc, exc.fields)

    @app.exception_handler(StorageUnavailableError)
    async def _storage_unavailable(request: Request, exc: StorageUnavailableError) -> JSONResponse:
        return _error(503, exc)

    @app.exception_handler(AggregationError)
    async def _aggregation_failed(request: Request, exc: AggregationError) -> JSONResponse:
        logger.error("rank.failed", extra={"error": str(exc)[:512]})
        return _error(503, exc)

    return app


app = create_app()
