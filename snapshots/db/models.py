"""SQLAlchemy models for captured snapshots, posts and links."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for ORM models."""


class CreatedAtMixin:
    """Adds a server-side created_at column."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class Post(CreatedAtMixin, Base):
    """A validated, sanitized post. ``content_hash`` is the dedup key."""

    __tablename__ = "posts"
    __table_args__ = (
        UniqueConstraint("content_hash", name="uq_posts_content_hash"),
        Index("ix_posts_timestamp", "timestamp"),
        Index("ix_posts_session", "session_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(128), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    title: Mapped[str] = mapped_column(String(1024), nullable=False)
    node_id: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    sentiment: Mapped[str] = mapped_column(String(32), nullable=False, default="neutral")
    # JSON array of raw ticker strings, e.g. '["$BTC", "eth"]'
    tickers: Mapped[str] = mapped_column(Text, nullable=False, default="[]", server_default="[]")
    depth: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    backend_dom_node_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    content_hash: Mapped[str] = mapped_column(String(64), nullable=False)


class Link(CreatedAtMixin, Base):
    """A link captured alongside a snapshot, stored verbatim."""

    __tablename__ = "links"
    __table_args__ = (Index("ix_links_timestamp", "timestamp"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(128), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    node_id: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    url: Mapped[str] = mapped_column(String(2048), nullable=False, default="")
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="")


class Snapshot(CreatedAtMixin, Base):
    """One summary row per capture session (upserted)."""

    __tablename__ = "snapshots"
    __table_args__ = (
        UniqueConstraint("session_id", name="uq_snapshots_session"),
        Index("ix_snapshots_timestamp", "timestamp"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(128), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    title: Mapped[str] = mapped_column(String(1024), nullable=False)
    total_posts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_links: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_tickers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    platform: Mapped[str] = mapped_column(String(32), nullable=False)
