"""Shared fixtures for followrank tests."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
import structlog

from followrank.graph import RelationshipRow
from followrank.storage import Account, Database


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep structlog output out of captured stdout."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'followrank.db'}"


@pytest_asyncio.fixture
async def database(database_url):
    """File-backed SQLite database with tables created."""
    db = Database(database_url)
    await db.init_db()
    yield db
    await db.close()


async def seed_accounts(db: Database, accounts: dict[str, list[str] | None]) -> None:
    """Insert one Account per username with the given follower list."""
    async with db.session() as session:
        for username, followed_by in accounts.items():
            session.add(Account(username=username, followed_by=followed_by))


def rows(**followers: list[str]) -> list[RelationshipRow]:
    """Build relationship rows from keyword arguments."""
    return [
        RelationshipRow(username=username, followed_by=followed_by)
        for username, followed_by in followers.items()
    ]


class FakeDatabase:
    """Database stand-in that records one mock session per transaction."""

    def __init__(self, fail_on: int | None = None) -> None:
        self.sessions: list[MagicMock] = []
        self._fail_on = fail_on

    @asynccontextmanager
    async def session(self):
        session = MagicMock()
        session.execute = AsyncMock()
        if self._fail_on is not None and len(self.sessions) == self._fail_on:
            session.execute.side_effect = RuntimeError("database is locked")
        self.sessions.append(session)
        yield session


@pytest.fixture
def fake_database():
    return FakeDatabase()
