import pytest

celery = pytest.importorskip("celery")  # noqa: F841

from snapshots.celery_app import INGEST_QUEUE, INGEST_TASK_NAME, create_celery_app
from snapshots.settings import Settings


def _make_settings() -> Settings:
    return Settings(
        redis_url="redis://localhost:6379/1",
        database_url="sqlite:///./var/storage/test.db",
        log_level="DEBUG",
        celery_worker_concurrency=3,
    )


def test_create_celery_app_routes_ingest_task():
    app = create_celery_app(_make_settings())

    assert app.conf.task_routes[INGEST_TASK_NAME] == {"queue": INGEST_QUEUE}
    assert app.conf.worker_concurrency == 3
    assert app.conf.broker_url == "redis://localhost:6379/1"
    assert "snapshots.tasks.ingest" in app.conf.include


def test_ingest_task_runs_pipeline(database_url):
    from snapshots.tasks.ingest import ingest_core, ingest_snapshot

    assert ingest_snapshot.name == INGEST_TASK_NAME

    result = ingest_core(
        {
            "sessionId": "worker-1",
            "timestamp": "2025-03-01T12:00:00+09:00",
            "url": "https://twitter.com/search?q=%24ETH",
            "title": "$ETH",
            "platform": "twitter",
            "posts": [{"nodeId": "n1", "role": "article", "text": "ETH 1h", "tickers": ["$ETH"]}],
        }
    )

    assert result["inserted"] == 1
    assert result["summary"]["sessionId"] == "worker-1"
    assert result["summary"]["totalTickers"] == 1
    assert result["summary"]["timestamp"].startswith("2025-03-01T03:00:00")
