"""Celery application bootstrap for background snapshot ingestion."""

from __future__ import annotations

import logging

from celery import Celery

from .settings import Settings, get_settings
from .utils.logging import configure_logging

_CELERY_APP: Celery | None = None

INGEST_TASK_NAME = "snapshots.tasks.ingest.ingest_snapshot"
INGEST_QUEUE = "snapshots.ingest"


def create_celery_app(settings: Settings | None = None) -> Celery:
    """Build a Celery instance from settings."""
    config = settings or get_settings()
    configure_logging(config.log_level, json_enabled=config.log_json)

    app = Celery(
        "snapshots",
        broker=config.redis_url,
        backend=config.redis_url,
        include=["snapshots.tasks.ingest"],
    )
    app.conf.update(
        task_default_queue="snapshots.default",
        task_default_exchange="snapshots",
        task_default_routing_key="snapshots.default",
        task_routes={INGEST_TASK_NAME: {"queue": INGEST_QUEUE}},
        task_soft_time_limit=config.celery_task_soft_time_limit,
        worker_concurrency=config.celery_worker_concurrency,
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        worker_send_task_events=True,
        task_send_sent_event=True,
    )

    _install_signal_handlers(app)
    return app


def get_celery_app() -> Celery:
    """Return the process-wide Celery instance."""
    global _CELERY_APP
    if _CELERY_APP is None:
        _CELERY_APP = create_celery_app()
    return _CELERY_APP


def _install_signal_handlers(app: Celery) -> None:
    from celery import signals

    logger = logging.getLogger("snapshots.worker")

    @signals.worker_shutdown.connect  # type: ignore[attr-defined]
    def _on_worker_shutdown(sender=None, **kwargs):  # noqa: ANN001
        logger.info("worker.shutdown", extra={"sender": str(sender)})
