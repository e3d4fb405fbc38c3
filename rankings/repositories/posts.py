"""Read-side queries over stored posts."""

from __future__ import annotations

from datetime import datetime
from typing import Iterator, List, NamedTuple, Optional

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from snapshots.db.models import Post


class TickerRow(NamedTuple):
    tickers: Optional[str]
    sentiment: Optional[str]
    timestamp: datetime
    url: str


def select_ticker_rows(session: Session, since: datetime) -> List[TickerRow]:
    """Article posts at or after ``since`` that carry a non-empty ticker list, newest first."""
    stmt = (
        select(Post.tickers, Post.sentiment, Post.timestamp, Post.url)
        .where(
            Post.timestamp >= since,
            Post.role == "article",
            Post.tickers != "[]",
        )
        .order_by(Post.timestamp.desc(), Post.id.desc())
    )
    return [TickerRow(*row) for row in session.execute(stmt)]


def post_counts_by_day(session: Session, since: datetime) -> List[tuple]:
    day = func.date(Post.timestamp)
    stmt = (
        select(day.label("date"), func.count(Post.id), func.count(distinct(Post.session_id)))
        .where(Post.timestamp >= since)
        .group_by(day)
        .order_by(day)
    )
    return [tuple(row) for row in session.execute(stmt)]


def sentiment_distribution(session: Session, since: datetime) -> List[tuple]:
    stmt = (
        select(Post.sentiment, func.count(Post.id))
        .where(Post.timestamp >= since)
        .group_by(Post.sentiment)
        .order_by(Post.sentiment)
    )
    return [tuple(row) for row in session.execute(stmt)]


def iter_recent_articles(session: Session, since: datetime) -> Iterator[Post]:
    stmt = (
        select(Post)
        .where(Post.timestamp >= since, Post.role == "article")
        .order_by(Post.timestamp.desc(), Post.id.desc())
    )
    yield from session.execute(stmt).scalars()
