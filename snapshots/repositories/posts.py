"""Repositories for persisting posts, links and snapshot summaries."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional, Sequence

from sqlalchemy import func, insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from snapshots.db.models import Link, Post, Snapshot
from snapshots.models.domain import LinkRecord, NormalizedPost, SnapshotSummary

_DIALECT_INSERTS: Dict[str, Callable[..., Any]] = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _upsert_insert(session: Session) -> Optional[Callable[..., Any]]:
    """Dialect insert() supporting ON CONFLICT, or None if the backend has none."""
    return _DIALECT_INSERTS.get(session.get_bind().dialect.name)


def _post_values(post: NormalizedPost) -> Dict[str, Any]:
    return {
        "session_id": post.session_id,
        "timestamp": post.timestamp,
        "url": post.url,
        "title": post.title,
        "node_id": post.node_id,
        "role": post.role,
        "text": post.text,
        "sentiment": post.sentiment,
        "tickers": post.tickers,
        "depth": post.depth,
        "backend_dom_node_id": post.backend_dom_node_id,
        "content_hash": post.content_hash,
    }


def get_existing_hashes(session: Session, hashes: Iterable[str]) -> set[str]:
    stmt = select(Post.content_hash).where(Post.content_hash.in_(list(hashes)))
    return {row[0] for row in session.execute(stmt)}


def save_posts(session: Session, posts: Sequence[NormalizedPost]) -> int:
    """Insert posts, ignoring any whose content_hash is already stored. Returns rows inserted."""
    if not posts:
        return 0
    dialect_insert = _upsert_insert(session)
    if dialect_insert is None:
        return _save_posts_checked(session, posts)

    inserted = 0
    for post in posts:
        stmt = (
            dialect_insert(Post)
            .values(**_post_values(post))
            .on_conflict_do_nothing(index_elements=[Post.content_hash])
        )
        inserted += session.execute(stmt).rowcount or 0
    return inserted


def _save_posts_checked(session: Session, posts: Sequence[NormalizedPost]) -> int:
    # No ON CONFLICT on this backend: filter against stored and in-batch hashes.
    seen = get_existing_hashes(session, (p.content_hash for p in posts))
    count = 0
    for post in posts:
        if post.content_hash in seen:
            continue
        seen.add(post.content_hash)
        session.add(Post(**_post_values(post)))
        count += 1
    session.flush()
    return count


def save_links(session: Session, session_id: str, timestamp: Any, links: Sequence[LinkRecord]) -> int:
    if not links:
        return 0
    rows = [
        {
            "session_id": session_id,
            "timestamp": timestamp,
            "node_id": link.node_id or "",
            "text": link.text or "",
            "url": link.url or "",
            "role": link.role or "",
        }
        for link in links
    ]
    session.execute(insert(Link), rows)
    return len(rows)


def upsert_snapshot(session: Session, summary: SnapshotSummary) -> None:
    """Insert the summary row or overwrite the existing row for the same session_id."""
    values = {
        "session_id": summary.session_id,
        "timestamp": summary.timestamp,
        "url": summary.url,
        "title": summary.title,
        "total_posts": summary.total_posts,
        "total_links": summary.total_links,
        "total_tickers": summary.total_tickers,
        "platform": summary.platform,
    }
    dialect_insert = _upsert_insert(session)
    if dialect_insert is not None:
        stmt = dialect_insert(Snapshot).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Snapshot.session_id],
            set_={key: value for key, value in values.items() if key != "session_id"},
        )
        session.execute(stmt)
        return

    existing = session.execute(
        select(Snapshot).where(Snapshot.session_id == summary.session_id)
    ).scalar_one_or_none()
    if existing is None:
        session.add(Snapshot(**values))
    else:
        for key, value in values.items():
            setattr(existing, key, value)
    session.flush()


def get_snapshot(session: Session, session_id: str) -> Snapshot | None:
    return session.execute(
        select(Snapshot).where(Snapshot.session_id == session_id)
    ).scalar_one_or_none()


def list_snapshots(session: Session, limit: int = 50) -> list[Snapshot]:
    stmt = select(Snapshot).order_by(Snapshot.timestamp.desc()).limit(limit)
    return list(session.execute(stmt).scalars())


def count_posts(session: Session, session_id: str | None = None) -> int:
    stmt = select(func.count()).select_from(Post)
    if session_id is not None:
        stmt = stmt.where(Post.session_id == session_id)
    return int(session.execute(stmt).scalar_one())
