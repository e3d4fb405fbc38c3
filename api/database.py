from __future__ import annotations

from typing import Generator

from sqlalchemy.orm import Session

from snapshots.db.session import init_db as _init_snapshot_db
from snapshots.db.session import session_scope


def init_db() -> None:
    _init_snapshot_db()


def session_dependency() -> Generator[Session, None, None]:
    with session_scope() as session:
        yield session
