from __future__ import annotations

import importlib
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client(database_url) -> TestClient:
    api_main = importlib.import_module("api.main")
    api_main = importlib.reload(api_main)
    return TestClient(api_main.app)


def _body(session_id: str = "cap-1", **overrides):
    body = {
        "sessionId": session_id,
        "timestamp": (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat(),
        "url": "https://x.com/search?q=%24SOL",
        "title": "$SOL - Search / X",
        "extractedData": {
            "posts": [
                {"nodeId": "n1", "role": "article", "text": "$SOL ripping 12m", "sentiment": "bullish", "tickers": ["$SOL"]},
                {"nodeId": "n2", "role": "article", "text": "sol and $bonk", "sentiment": "bullish", "tickers": ["sol", "$BONK"]},
                {"nodeId": "n3", "role": "article", "text": "Refused to connect"},
                {"nodeId": "n4", "role": "link", "text": "Home"},
            ],
            "links": [{"nodeId": "l1", "text": "Home", "url": "https://x.com/home", "role": "link"}],
            "summary": {"socialPlatform": "twitter"},
        },
    }
    body.update(overrides)
    return body


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_store_snapshot_reports_counts(client):
    response = client.post("/api/snapshots", json=_body())

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["counts"]["submitted"] == 4
    assert payload["counts"]["accepted"] == 2
    assert payload["counts"]["inserted"] == 2
    assert payload["counts"]["rejections"] == {"error_page": 1, "role": 1}
    assert payload["summary"]["totalPosts"] == 2
    assert payload["summary"]["totalLinks"] == 1
    assert payload["summary"]["totalTickers"] == 2
    assert "2/4" in payload["message"]

    again = client.post("/api/snapshots", json=_body()).json()
    assert again["counts"]["inserted"] == 0
    assert again["counts"]["duplicates"] == 2


def test_missing_platform_defaults_to_unknown(client):
    body = _body()
    del body["extractedData"]["summary"]

    payload = client.post("/api/snapshots", json=body).json()

    assert payload["summary"]["platform"] == "unknown"
    assert payload["counts"]["accepted"] == 0


def test_malformed_snapshot_returns_422(client):
    body = _body()
    del body["sessionId"]

    response = client.post("/api/snapshots", json=body)

    assert response.status_code == 422
    payload = response.json()
    assert payload["success"] is False
    assert "sessionId" in payload["fields"]

    missing_data = client.post("/api/snapshots", json={"sessionId": "x"})
    assert missing_data.status_code == 422
    assert missing_data.json()["fields"] == ["extractedData"]


def test_list_snapshots_newest_first(client):
    older = _body("cap-old", timestamp=(datetime.now(timezone.utc) - timedelta(days=2)).isoformat())
    client.post("/api/snapshots", json=older)
    client.post("/api/snapshots", json=_body("cap-new"))

    response = client.get("/api/snapshots", params={"limit": 10})

    assert response.status_code == 200
    assert [row["sessionId"] for row in response.json()] == ["cap-new", "cap-old"]

    limited = client.get("/api/snapshots", params={"limit": 1}).json()
    assert len(limited) == 1


def test_ticker_rankings(client):
    client.post("/api/snapshots", json=_body())

    response = client.get("/api/tickers", params={"days": 7})

    assert response.status_code == 200
    payload = response.json()
    assert payload["totalTickers"] == 2
    assert payload["timeRange"] == "7 days"
    first = payload["tickers"][0]
    assert first["symbol"] == "SOL"
    assert first["totalMentions"] == 2
    assert first["rank"] == 1
    assert first["sentimentLabel"] == "Very Bullish"
    assert first["sentimentScore"] == pytest.approx(1.0)
    assert first["dexscreenerUrl"] == "https://dexscreener.com/search?q=SOL"


def test_trends(client):
    client.post("/api/snapshots", json=_body())

    response = client.get("/api/trends", params={"days": 7, "limit": 5000})

    assert response.status_code == 200
    payload = response.json()
    assert payload["summary"]["totalPosts"] == 2
    assert {p["text"] for p in payload["recentPosts"]} == {"$SOL ripping", "sol and $bonk"}
    assert sum(t["postCount"] for t in payload["postTrends"]) == 2
