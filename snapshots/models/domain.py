"""Domain DTOs for the snapshot ingestion pipeline.

Wire names are camelCase (as sent by the capture tool); attributes are
snake_case. Every model accepts either form on input.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidatorFunctionWrapHandler, field_validator
from pydantic.alias_generators import to_camel


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class RawPost(_WireModel):
    """A post as extracted from the page. Nothing about it is trusted.

    A field with an unusable value falls back to None instead of failing the
    post; only the validator decides whether a post is kept. ``tickers`` is
    kept exactly as sent and cleaned up when rankings are computed.
    """

    node_id: Optional[str] = None
    role: Optional[str] = None
    text: Optional[str] = None
    sentiment: Optional[str] = None
    tickers: Any = None
    depth: Optional[int] = None
    backend_dom_node_id: Optional[int] = Field(None, alias="backendDOMNodeId")

    @field_validator("node_id", "role", "text", "sentiment", "depth", "backend_dom_node_id", mode="wrap")
    @classmethod
    def _none_on_bad_value(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None


class LinkRecord(_WireModel):
    """A link captured on the page; stored as-is."""

    node_id: Optional[str] = None
    text: Optional[str] = None
    url: Optional[str] = None
    role: Optional[str] = None


class SnapshotPayload(_WireModel):
    """One capture event. ``posts`` stays untyped so a bad post is rejected, not fatal."""

    session_id: str = Field(..., min_length=1)
    timestamp: datetime
    url: str
    title: str
    platform: Optional[str] = None
    posts: List[Any]
    links: List[LinkRecord] = Field(default_factory=list)

    @field_validator("timestamp")
    @classmethod
    def _timestamp_to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @field_validator("links", mode="before")
    @classmethod
    def _null_links(cls, value: Any) -> Any:
        return [] if value is None else value


class NormalizedPost(_WireModel):
    """A validated post ready to be written."""

    session_id: str
    timestamp: datetime
    url: str
    title: str
    node_id: str
    role: str
    text: str
    sentiment: str = "neutral"
    tickers: str = Field("[]", description="JSON array of raw ticker strings")
    depth: int = 0
    backend_dom_node_id: int = Field(0, alias="backendDOMNodeId")
    content_hash: str = Field(..., description="sha256 dedup key")


class SnapshotSummary(_WireModel):
    model_config = ConfigDict(from_attributes=True)

    session_id: str
    timestamp: datetime
    url: str
    title: str
    total_posts: int = 0
    total_links: int = 0
    total_tickers: int = 0
    platform: str

    @field_validator("timestamp")
    @classmethod
    def _timestamp_to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class IngestResult(_WireModel):
    """Outcome of one ingest call: the stored summary plus per-stage counts."""

    summary: SnapshotSummary
    submitted: int
    accepted: int
    rejected: int
    duplicates: int
    inserted: int
    links: int
    rejections: Dict[str, int] = Field(default_factory=dict)
