"""Per-ticker mention and sentiment rankings, recomputed from stored posts on every call."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List

from sqlalchemy.exc import SQLAlchemyError

from rankings.models.domain import TickerRanking, TickerStat
from rankings.repositories.posts import TickerRow, select_ticker_rows
from snapshots.db.session import SessionFactory, session_scope
from snapshots.errors import AggregationError
from snapshots.models.domain import as_utc
from snapshots.services.tickers import normalize_symbol, parse_ticker_list
from snapshots.services.url_guard import is_allowed_url
from snapshots.utils.logging import get_logger

logger = get_logger(__name__)

TWITTER_SEARCH_URL = "https://twitter.com/search?q=%24{symbol}&src=typed_query&f=live"
DEXSCREENER_SEARCH_URL = "https://dexscreener.com/search?q={symbol}"


def twitter_search_url(symbol: str) -> str:
    return TWITTER_SEARCH_URL.format(symbol=symbol)


def dexscreener_url(symbol: str) -> str:
    return DEXSCREENER_SEARCH_URL.format(symbol=symbol)


def sentiment_score(bullish: int, bearish: int, total: int) -> float:
    if total == 0:
        return 0.0
    return (bullish - bearish) / total


def sentiment_label(bullish: int, bearish: int, neutral: int) -> str:
    """Bucket a sentiment split. The bullish branches are checked before the bearish ones."""
    total = bullish + bearish + neutral
    if total == 0:
        return "Unknown"

    bullish_pct = bullish / total * 100
    bearish_pct = bearish / total * 100

    if bullish_pct > 60:
        return "Very Bullish"
    if bullish_pct > 40:
        return "Bullish"
    if bearish_pct > 60:
        return "Very Bearish"
    if bearish_pct > 40:
        return "Bearish"
    return "Neutral"


def since_days_ago(days: int, now: datetime | None = None) -> datetime:
    return (now or datetime.now(timezone.utc)) - timedelta(days=days)


@dataclass
class _Tally:
    symbol: str
    last_mention: datetime
    total: int = 0
    bullish: int = 0
    bearish: int = 0
    neutral: int = 0

    def add(self, sentiment: str | None, timestamp: datetime) -> None:
        self.total += 1
        if sentiment == "bullish":
            self.bullish += 1
        elif sentiment == "bearish":
            self.bearish += 1
        else:
            self.neutral += 1
        if timestamp > self.last_mention:
            self.last_mention = timestamp


class TickerAggregator:
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory: SessionFactory = session_factory or session_scope

    def aggregate(self, rows: Iterable[TickerRow]) -> List[TickerStat]:
        """Tally qualifying rows into ranked stats. Bad rows and entries are skipped."""
        tallies: Dict[str, _Tally] = {}
        skipped = 0
        for row in rows:
            if not is_allowed_url(row.url):
                continue
            tickers = parse_ticker_list(row.tickers)
            if tickers is None:
                skipped += 1
                continue
            timestamp = as_utc(row.timestamp)
            for raw in tickers:
                symbol = normalize_symbol(raw)
                if symbol is None:
                    continue
                tally = tallies.get(symbol)
                if tally is None:
                    tally = tallies[symbol] = _Tally(symbol=symbol, last_mention=timestamp)
                tally.add(row.sentiment, timestamp)

        if skipped:
            logger.debug("rank.skipped_rows", extra={"skipped": skipped})

        # sorted() is stable: equal counts keep first-seen order
        ordered = sorted(tallies.values(), key=lambda t: t.total, reverse=True)
        return [
            TickerStat(
                ticker=f"${tally.symbol}",
                symbol=tally.symbol,
                total_mentions=tally.total,
                bullish_count=tally.bullish,
                bearish_count=tally.bearish,
                neutral_count=tally.neutral,
                last_mention=tally.last_mention,
                sentiment_score=sentiment_score(tally.bullish, tally.bearish, tally.total),
                sentiment_label=sentiment_label(tally.bullish, tally.bearish, tally.neutral),
                rank=index,
                twitter_url=twitter_search_url(tally.symbol),
                dexscreener_url=dexscreener_url(tally.symbol),
            )
            for index, tally in enumerate(ordered, start=1)
        ]

    def rank(self, since: datetime) -> List[TickerStat]:
        since = as_utc(since)
        try:
            with self._session_factory() as session:
                rows = select_ticker_rows(session, since)
        except SQLAlchemyError as exc:
            raise AggregationError(f"Could not read posts for ranking: {exc}") from exc
        stats = self.aggregate(rows)
        logger.info("rank.done", extra={"since": since.isoformat(), "rows": len(rows), "tickers": len(stats)})
        return stats

    def ranking(self, days: int, now: datetime | None = None) -> TickerRanking:
        """The /api/tickers payload for a look-back window of ``days``."""
        current = now or datetime.now(timezone.utc)
        stats = self.rank(since_days_ago(days, current))
        return TickerRanking(
            tickers=stats,
            total_tickers=len(stats),
            time_range=f"{days} days",
            updated=current,
        )


def rank(since: datetime) -> List[TickerStat]:
    return TickerAggregator().rank(since)
