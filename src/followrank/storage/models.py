"""SQLAlchemy ORM models for followrank."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, Index, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Account(Base):
    """Social account with its follower list and stored influence score."""

    __tablename__ = "instagram_accounts"

    username: Mapped[str] = mapped_column(String(128), primary_key=True)
    full_name: Mapped[str | None] = mapped_column(String(256))
    followers_count: Mapped[int] = mapped_column(Integer, default=0)
    follows_count: Mapped[int] = mapped_column(Integer, default=0)
    followed_by: Mapped[list[str] | None] = mapped_column(JSON(none_as_null=True))
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    category: Mapped[str | None] = mapped_column(String(128))
    pagerank_score: Mapped[float | None] = mapped_column(Float)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (Index("idx_accounts_pagerank", "pagerank_score"),)
