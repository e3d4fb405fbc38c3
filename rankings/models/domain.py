"""DTOs for ticker rankings and trend reports (computed per request, never stored)."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ResponseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TickerStat(_ResponseModel):
    ticker: str = Field(..., description="Display form, e.g. $BTC")
    symbol: str = Field(..., description="Normalized symbol, e.g. BTC")
    total_mentions: int
    bullish_count: int
    bearish_count: int
    neutral_count: int
    last_mention: datetime
    sentiment_score: float
    sentiment_label: str
    rank: int
    twitter_url: str
    dexscreener_url: str


class TickerRanking(_ResponseModel):
    tickers: List[TickerStat] = Field(default_factory=list)
    total_tickers: int = 0
    time_range: str
    updated: datetime


class PostTrend(_ResponseModel):
    date: str
    post_count: int
    session_count: int


class SentimentCount(_ResponseModel):
    sentiment: str
    count: int


class RecentPost(_ResponseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: str
    timestamp: datetime
    url: str
    title: str
    node_id: str
    role: str
    text: str
    sentiment: str
    tickers: List[str] = Field(default_factory=list)


class TrendSummary(_ResponseModel):
    total_posts: int
    time_range: str


class TrendReport(_ResponseModel):
    post_trends: List[PostTrend] = Field(default_factory=list)
    sentiment_data: List[SentimentCount] = Field(default_factory=list)
    recent_posts: List[RecentPost] = Field(default_factory=list)
    summary: TrendSummary
