"""Celery task wrapping the ingestion pipeline."""

from __future__ import annotations

from typing import Any, Dict

from celery import shared_task

from snapshots.celery_app import INGEST_TASK_NAME
from snapshots.db.session import init_db
from snapshots.pipeline import IngestionPipeline


def ingest_core(snapshot: Dict[str, Any]) -> Dict[str, Any]:
    """Run the pipeline on a JSON snapshot and return a JSON-safe result."""
    init_db()
    result = IngestionPipeline().ingest(snapshot)
    return result.model_dump(mode="json", by_alias=True)


@shared_task(name=INGEST_TASK_NAME)
def ingest_snapshot(snapshot: Dict[str, Any]) -> Dict[str, Any]:
    return ingest_core(snapshot)
