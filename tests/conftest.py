from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture()
def database_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Point the store at a fresh SQLite file and create the schema."""
    from snapshots.db.session import init_db
    from snapshots.settings import reset_settings_cache

    url = f"sqlite:///{tmp_path / 'trends.db'}"
    monkeypatch.setenv("TRENDS_DATABASE_URL", url)
    reset_settings_cache()
    init_db()
    yield url
    reset_settings_cache()
