"""Errors raised by ingestion and ranking."""

from __future__ import annotations


class IngestError(Exception):
    """Base ingestion error."""


class MalformedSnapshotError(IngestError):
    """Required snapshot fields are missing or unusable; nothing was written."""

    def __init__(self, message: str, *, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class StorageUnavailableError(IngestError):
    """The store failed mid-ingest; the transaction was rolled back."""


class AggregationError(Exception):
    """Ranking could not read from the store."""
