from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from rankings.aggregator import TickerAggregator
from rankings.models.domain import TickerRanking, TrendReport
from rankings.trends import build_trend_report
from snapshots.models.domain import SnapshotSummary
from snapshots.pipeline import IngestionPipeline
from snapshots.repositories.posts import list_snapshots
from snapshots.settings import get_settings

from .database import session_dependency
from .models import HealthStatus, IngestResponse, snapshot_from_request

router = APIRouter(prefix="/api")

SessionDep = Annotated[Session, Depends(session_dependency)]


@router.get("/health", response_model=HealthStatus, tags=["system"])
async def health_route() -> HealthStatus:
    return HealthStatus(status="healthy", timestamp=datetime.now(timezone.utc))


@router.post("/snapshots", response_model=IngestResponse)
async def store_snapshot_route(body: Annotated[Any, Body()]) -> IngestResponse:
    # MalformedSnapshotError / StorageUnavailableError are mapped in api.main
    result = IngestionPipeline().ingest(snapshot_from_request(body))
    return IngestResponse.from_result(result)


@router.get("/snapshots", response_model=list[SnapshotSummary])
async def list_snapshots_route(
    session: SessionDep,
    limit: int | None = Query(default=None, ge=1),
) -> list[SnapshotSummary]:
    settings = get_settings()
    size = min(limit or settings.snapshots_default_limit, settings.max_limit)
    return [SnapshotSummary.model_validate(row) for row in list_snapshots(session, size)]


@router.get("/tickers", response_model=TickerRanking)
async def ticker_rankings_route(days: int | None = Query(default=None, ge=0)) -> TickerRanking:
    window = get_settings().default_days if days is None else days
    return TickerAggregator().ranking(window)


@router.get("/trends", response_model=TrendReport)
async def trends_route(
    days: int | None = Query(default=None, ge=0),
    limit: int = Query(default=100, ge=1),
) -> TrendReport:
    settings = get_settings()
    window = settings.default_days if days is None else days
    return build_trend_report(window, min(limit, settings.max_limit))
