"""Load follower relationship rows from the account store."""

from __future__ import annotations

from sqlalchemy import select

from followrank.core import DataSourceError, get_logger
from followrank.graph.schemas import RelationshipRow
from followrank.storage import Account, Database

logger = get_logger(__name__)


class AccountSource:
    """Fetch accounts that have at least one recorded follower."""

    def __init__(self, database: Database) -> None:
        """Initialize account source.

        Args:
            database: Database instance to read accounts from.
        """
        self._database = database

    async def fetch_rows(self) -> list[RelationshipRow]:
        """Fetch relationship rows for every account with followers.

        Returns:
            List of validated RelationshipRow objects, each with a non-empty
            follower list.

        Raises:
            DataSourceError: If the query fails.
        """
        try:
            async with self._database.session() as session:
                result = await session.execute(
                    select(Account.username, Account.followed_by).where(
                        Account.followed_by.is_not(None)
                    )
                )
                raw_rows = result.all()
        except Exception as e:
            logger.error(f"Failed to fetch relationship rows: {e}")
            raise DataSourceError(
                f"Failed to fetch relationship rows: {e}",
                operation="fetch_rows",
            ) from e

        rows = [
            RelationshipRow(username=username, followed_by=followed_by)
            for username, followed_by in raw_rows
        ]
        rows = [row for row in rows if row.followed_by]

        logger.info(f"Processing {len(rows)} accounts with relationships")
        return rows
