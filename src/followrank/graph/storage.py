"""Ranking results persistence to database."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from sqlalchemy import bindparam, select, update

from followrank.core import PersistenceError, get_logger
from followrank.storage import Account, Database

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 1000

_CENTS = Decimal("0.01")


def round_score(score: float) -> float:
    """Round to 2 decimals, halves away from zero like SQL ROUND(numeric, 2)."""
    return float(Decimal(repr(float(score))).quantize(_CENTS, rounding=ROUND_HALF_UP))


class RankingStorage:
    """Write PageRank scores back onto stored accounts."""

    def __init__(self, database: Database) -> None:
        """Initialize ranking storage.

        Args:
            database: Database instance for persistence.
        """
        self._database = database

    async def save_scores(
        self,
        scores: Mapping[str, float],
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> int:
        """Update ``pagerank_score`` for each account, one statement per batch.

        Scores are rounded to 2 decimals. Each batch commits on its own, so
        batches written before a failure stay written. Accounts without a
        stored row are left alone.

        Args:
            scores: Mapping of username to score.
            batch_size: Number of accounts per UPDATE statement.

        Returns:
            Number of scores sent to the store.

        Raises:
            PersistenceError: If a batch fails.
        """
        if not scores:
            logger.warning("No PageRank scores to save")
            return 0

        table = Account.__table__
        stmt = (
            update(table)
            .where(table.c.username == bindparam("b_username"))
            .values(pagerank_score=bindparam("b_score"))
        )

        items = list(scores.items())
        saved_count = 0

        for batch_index, start in enumerate(range(0, len(items), batch_size)):
            batch = items[start : start + batch_size]
            params = [
                {"b_username": username, "b_score": round_score(score)}
                for username, score in batch
            ]
            try:
                async with self._database.session() as session:
                    await session.execute(stmt, params)
            except Exception as e:
                logger.error(f"Failed to save PageRank batch {batch_index}: {e}")
                raise PersistenceError(
                    f"Failed to save PageRank scores: {e}",
                    batch_index=batch_index,
                    saved_count=saved_count,
                ) from e
            saved_count += len(batch)

        logger.info(f"Saved {saved_count} PageRank scores")
        return saved_count

    async def get_top_scores(self, limit: int = 100) -> Sequence[Account]:
        """Get accounts with a stored score, highest first.

        Args:
            limit: Maximum number of results.

        Returns:
            List of Account objects sorted by PageRank descending.
        """
        async with self._database.session() as session:
            stmt = (
                select(Account)
                .where(Account.pagerank_score.is_not(None))
                .order_by(Account.pagerank_score.desc(), Account.username)
                .limit(limit)
            )
            result = await session.execute(stmt)
            return result.scalars().all()
