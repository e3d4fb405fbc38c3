"""Snapshot ingestion: validate -> sanitize -> fingerprint -> persist."""

from __future__ import annotations

import json
from collections import Counter
from typing import Any, List, Tuple

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from snapshots.db.session import SessionFactory, session_scope
from snapshots.errors import MalformedSnapshotError, StorageUnavailableError
from snapshots.models.domain import IngestResult, NormalizedPost, RawPost, SnapshotPayload, SnapshotSummary
from snapshots.repositories.posts import save_links, save_posts, upsert_snapshot
from snapshots.services.fingerprint import fingerprint
from snapshots.services.sanitizer import strip_relative_time
from snapshots.services.tickers import distinct_symbols
from snapshots.services.validator import PostValidator
from snapshots.utils.logging import get_logger

logger = get_logger(__name__)

# Counted under this reason when a post is not a JSON object.
UNPARSEABLE = "unparseable"


def parse_snapshot(snapshot: Any) -> SnapshotPayload:
    """Validate the envelope of a snapshot, raising MalformedSnapshotError on any problem."""
    if isinstance(snapshot, SnapshotPayload):
        return snapshot
    try:
        return SnapshotPayload.model_validate(snapshot)
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) or "snapshot" for err in exc.errors()})
        raise MalformedSnapshotError(
            f"Malformed snapshot: invalid or missing {', '.join(fields)}",
            fields=fields,
        ) from exc


def _ticker_list(post: RawPost) -> List[Any]:
    return post.tickers if isinstance(post.tickers, list) else []


def normalize_post(post: RawPost, snapshot: SnapshotPayload) -> NormalizedPost:
    text = strip_relative_time((post.text or "").strip()) or ""
    node_id = post.node_id or ""
    return NormalizedPost(
        session_id=snapshot.session_id,
        timestamp=snapshot.timestamp,
        url=snapshot.url,
        title=snapshot.title,
        node_id=node_id,
        role=post.role or "",
        text=text,
        sentiment=post.sentiment or "neutral",
        tickers=json.dumps(post.tickers or []),
        depth=post.depth or 0,
        backend_dom_node_id=post.backend_dom_node_id or 0,
        content_hash=fingerprint(snapshot.session_id, snapshot.url, node_id, text),
    )


class IngestionPipeline:
    """Turns one raw snapshot into stored posts, links and a summary row.

    All writes for a snapshot happen in one transaction. Rejected and
    duplicate posts are counted, never raised.
    """

    def __init__(
        self,
        validator: PostValidator | None = None,
        session_factory: SessionFactory | None = None,
    ) -> None:
        self._validator = validator or PostValidator()
        self._session_factory: SessionFactory = session_factory or session_scope

    def select_valid(self, snapshot: SnapshotPayload) -> Tuple[List[RawPost], Counter[str]]:
        accepted: List[RawPost] = []
        rejections: Counter[str] = Counter()
        for item in snapshot.posts:
            try:
                post = RawPost.model_validate(item)
            except ValidationError:
                rejections[UNPARSEABLE] += 1
                continue
            reason = self._validator.rejection_reason(post, snapshot.url, snapshot.platform)
            if reason is not None:
                rejections[reason] += 1
                continue
            accepted.append(post)
        return accepted, rejections

    def ingest(self, snapshot: Any) -> IngestResult:
        payload = parse_snapshot(snapshot)
        logger.info(
            "ingest.start",
            extra={"session_id": payload.session_id, "posts": len(payload.posts), "links": len(payload.links)},
        )

        valid_posts, rejections = self.select_valid(payload)
        normalized = [normalize_post(post, payload) for post in valid_posts]
        summary = SnapshotSummary(
            session_id=payload.session_id,
            timestamp=payload.timestamp,
            url=payload.url,
            title=payload.title,
            total_posts=len(valid_posts),
            total_links=len(payload.links),
            total_tickers=len(distinct_symbols(_ticker_list(post) for post in valid_posts)),
            platform=payload.platform or "unknown",
        )

        try:
            with self._session_factory() as session:
                upsert_snapshot(session, summary)
                inserted = save_posts(session, normalized)
                link_count = save_links(session, payload.session_id, payload.timestamp, payload.links)
        except SQLAlchemyError as exc:
            logger.error(
                "ingest.storage_failed",
                extra={"session_id": payload.session_id, "error": str(exc)[:512]},
            )
            raise StorageUnavailableError(f"Could not store snapshot {payload.session_id}: {exc}") from exc

        result = IngestResult(
            summary=summary,
            submitted=len(payload.posts),
            accepted=len(valid_posts),
            rejected=sum(rejections.values()),
            duplicates=len(normalized) - inserted,
            inserted=inserted,
            links=link_count,
            rejections=dict(rejections),
        )
        logger.info(
            "ingest.stored",
            extra={
                "session_id": payload.session_id,
                "submitted": result.submitted,
                "accepted": result.accepted,
                "inserted": result.inserted,
                "duplicates": result.duplicates,
                "rejections": result.rejections,
            },
        )
        return result


def ingest(snapshot: Any) -> IngestResult:
    """Ingest one snapshot with the default validator and session scope."""
    return IngestionPipeline().ingest(snapshot)
