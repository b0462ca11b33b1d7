"""Pydantic schemas for relationship input rows and ranking results."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RelationshipRow(BaseModel):
    """One account and the accounts that follow it."""

    model_config = ConfigDict(frozen=True)

    username: str
    followed_by: list[str] = Field(default_factory=list)

    @field_validator("followed_by", mode="before")
    @classmethod
    def coerce_followers(cls, v: Any) -> list[str]:
        """Treat null or non-list follower data as no followers."""
        if not isinstance(v, (list, tuple)):
            return []
        return [follower for follower in v if isinstance(follower, str)]


class RankingStats(BaseModel):
    """Summary counters for one ranking computation."""

    model_config = ConfigDict(populate_by_name=True)

    nodes: int = 0
    relationships: int = 0
    iterations: int = 0
    selected_followers_count: int | Literal["all"] | None = Field(
        default=None, alias="selectedFollowersCount"
    )


class RankingOutcome(BaseModel):
    """Result of a ranking computation, serializable to the API contract."""

    success: bool
    scores: dict[str, float] = Field(default_factory=dict)
    stats: RankingStats | None = None
    error: str | None = None

    @classmethod
    def empty(cls) -> RankingOutcome:
        return cls(success=True, scores={}, stats=RankingStats())

    @classmethod
    def failure(cls, message: str) -> RankingOutcome:
        return cls(success=False, scores={}, error=message)

    def to_dict(self) -> dict[str, Any]:
        """Dump using the camelCase contract keys, dropping unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
