"""Dashboard trend report: daily volume, sentiment split and recent valid posts."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from rankings.aggregator import since_days_ago
from rankings.models.domain import PostTrend, RecentPost, SentimentCount, TrendReport, TrendSummary
from rankings.repositories.posts import iter_recent_articles, post_counts_by_day, sentiment_distribution
from snapshots.db.models import Post
from snapshots.db.session import SessionFactory, session_scope
from snapshots.errors import AggregationError
from snapshots.models.domain import as_utc
from snapshots.services.sanitizer import strip_relative_time
from snapshots.services.tickers import parse_ticker_list
from snapshots.services.url_guard import is_allowed_url
from snapshots.services.validator import looks_like_error_page


def _to_recent_post(post: Post) -> RecentPost:
    tickers = parse_ticker_list(post.tickers) or []
    return RecentPost(
        id=post.id,
        session_id=post.session_id,
        timestamp=as_utc(post.timestamp),
        url=post.url,
        title=post.title,
        node_id=post.node_id,
        role=post.role,
        # rows stored before sanitizing existed may still carry "2h" noise
        text=strip_relative_time(post.text) or "",
        sentiment=post.sentiment,
        tickers=[t for t in tickers if isinstance(t, str)],
    )


def build_trend_report(
    days: int,
    limit: int,
    *,
    session_factory: SessionFactory | None = None,
    now: datetime | None = None,
) -> TrendReport:
    since = since_days_ago(days, now or datetime.now(timezone.utc))
    factory = session_factory or session_scope
    try:
        with factory() as session:
            trends = [
                PostTrend(date=str(day), post_count=posts, session_count=sessions)
                for day, posts, sessions in post_counts_by_day(session, since)
            ]
            sentiments = [
                SentimentCount(sentiment=sentiment, count=count)
                for sentiment, count in sentiment_distribution(session, since)
            ]
            recent: List[RecentPost] = []
            for post in iter_recent_articles(session, since):
                if len(recent) >= limit:
                    break
                if not is_allowed_url(post.url) or looks_like_error_page(post.text):
                    continue
                recent.append(_to_recent_post(post))
    except SQLAlchemyError as exc:
        raise AggregationError(f"Could not build trend report: {exc}") from exc

    return TrendReport(
        post_trends=trends,
        sentiment_data=sentiments,
        recent_posts=recent,
        summary=TrendSummary(total_posts=len(recent), time_range=f"{days} days"),
    )
