from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from snapshots.errors import MalformedSnapshotError
from snapshots.models.domain import IngestResult, SnapshotSummary


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime


class IngestCounts(_ApiModel):
    submitted: int
    accepted: int
    rejected: int
    duplicates: int
    inserted: int
    links: int
    rejections: dict[str, int] = Field(default_factory=dict)


class IngestResponse(_ApiModel):
    success: bool = True
    message: str
    summary: SnapshotSummary
    counts: IngestCounts

    @classmethod
    def from_result(cls, result: IngestResult) -> "IngestResponse":
        return cls(
            message=(
                f"Stored snapshot {result.summary.session_id}: "
                f"{result.accepted}/{result.submitted} posts accepted, {result.inserted} new"
            ),
            summary=result.summary,
            counts=IngestCounts(
                submitted=result.submitted,
                accepted=result.accepted,
                rejected=result.rejected,
                duplicates=result.duplicates,
                inserted=result.inserted,
                links=result.links,
                rejections=result.rejections,
            ),
        )


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    fields: list[str] = Field(default_factory=list)


def snapshot_from_request(body: Any) -> dict[str, Any]:
    """Flatten the capture tool's ``{..., extractedData: {...}}`` body into a pipeline snapshot."""
    if not isinstance(body, Mapping):
        raise MalformedSnapshotError("Malformed snapshot: body must be a JSON object", fields=["body"])
    extracted = body.get("extractedData")
    if not isinstance(extracted, Mapping):
        raise MalformedSnapshotError("Malformed snapshot: missing extractedData", fields=["extractedData"])
    summary = extracted.get("summary")
    platform = summary.get("socialPlatform") if isinstance(summary, Mapping) else None
    return {
        "sessionId": body.get("sessionId"),
        "timestamp": body.get("timestamp"),
        "url": body.get("url"),
        "title": body.get("title"),
        "platform": platform or "unknown",
        "posts": extracted.get("posts") or [],
        "links": extracted.get("links") or [],
    }
