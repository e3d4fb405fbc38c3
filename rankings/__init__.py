"""Ticker rankings and trend reports over stored posts."""

from .aggregator import TickerAggregator, rank, sentiment_label, sentiment_score  # noqa: F401
from .trends import build_trend_report  # noqa: F401

__all__ = [
    "TickerAggregator",
    "build_trend_report",
    "rank",
    "sentiment_label",
    "sentiment_score",
]
