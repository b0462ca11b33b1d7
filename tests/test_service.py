"""Test the ranking pipeline and its output contract."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import select

from followrank.core import DataSourceError, PersistenceError, Settings
from followrank.graph.pagerank import PageRankCalculator
from followrank.graph.service import InfluenceRankingService
from followrank.graph.storage import RankingStorage
from followrank.storage import Account
from tests.conftest import FakeDatabase, rows, seed_accounts


def make_service(source_rows, storage=None, **kwargs):
    source = MagicMock()
    source.fetch_rows = AsyncMock(return_value=source_rows)
    if storage is None:
        storage = MagicMock()
        storage.save_scores = AsyncMock(return_value=len(source_rows))
    return InfluenceRankingService(source=source, storage=storage, **kwargs), storage


class TestGlobalRanking:
    """Unrestricted computation."""

    @pytest.mark.asyncio
    async def test_star_graph_outcome(self):
        service, _ = make_service(rows(hub=["a", "b", "c"]))
        outcome = await service.calculate()

        assert outcome.to_dict() == {
            "success": True,
            "scores": {"hub": 100.0, "a": 0.0, "b": 0.0, "c": 0.0},
            "stats": {
                "nodes": 4,
                "relationships": 3,
                "iterations": 3,
                "selectedFollowersCount": "all",
            },
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("selected", [None, []])
    async def test_global_run_persists_once(self, selected):
        service, storage = make_service(rows(hub=["a", "b"]))
        outcome = await service.calculate(selected)

        storage.save_scores.assert_awaited_once()
        args, kwargs = storage.save_scores.await_args
        assert args[0] == outcome.scores
        assert kwargs == {"batch_size": 1000}

    @pytest.mark.asyncio
    async def test_persistence_failure_is_not_fatal(self):
        storage = MagicMock()
        storage.save_scores = AsyncMock(
            side_effect=PersistenceError("disk full", batch_index=0, saved_count=0)
        )
        service, _ = make_service(rows(hub=["a", "b"]), storage=storage)

        outcome = await service.calculate()

        assert outcome.success
        assert outcome.scores["hub"] == 100.0
        assert outcome.stats.nodes == 3

    @pytest.mark.asyncio
    async def test_unexpected_storage_error_is_not_fatal(self):
        storage = MagicMock()
        storage.save_scores = AsyncMock(side_effect=RuntimeError("connection reset"))
        service, _ = make_service(rows(hub=["a"]), storage=storage)

        outcome = await service.calculate()

        assert outcome.success
        assert set(outcome.scores) == {"hub", "a"}

    @pytest.mark.asyncio
    async def test_partial_write_back_keeps_full_result(self):
        followers = [f"fan{i}" for i in range(1499)]
        database = FakeDatabase(fail_on=1)
        source = MagicMock()
        source.fetch_rows = AsyncMock(return_value=rows(hub=followers))
        service = InfluenceRankingService(source=source, storage=RankingStorage(database))

        outcome = await service.calculate()

        assert outcome.success
        assert len(outcome.scores) == 1500
        assert outcome.scores["hub"] == 100.0
        assert outcome.stats.nodes == 1500
        assert outcome.stats.relationships == 1499
        # first batch written, second raised, nothing attempted after it
        assert len(database.sessions) == 2
        database.sessions[0].execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_without_storage_nothing_is_written(self):
        source = MagicMock()
        source.fetch_rows = AsyncMock(return_value=rows(hub=["a"]))
        outcome = await InfluenceRankingService(source=source).calculate()
        assert outcome.success

    @pytest.mark.asyncio
    async def test_custom_batch_size_is_forwarded(self):
        service, storage = make_service(rows(hub=["a"]), batch_size=10)
        await service.calculate()
        assert storage.save_scores.await_args.kwargs == {"batch_size": 10}


class TestRestrictedRanking:
    """Computation over a selected follower subset."""

    @pytest.mark.asyncio
    async def test_filter_semantics(self):
        service, storage = make_service(rows(A=["X", "Y"], B=["Y", "Z"]))
        outcome = await service.calculate(["Y"])

        assert set(outcome.scores) == {"A", "B", "Y"}
        assert outcome.stats.relationships == 2
        assert outcome.stats.nodes == 3
        assert outcome.stats.selected_followers_count == 1
        storage.save_scores.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_selected_count_includes_duplicates(self):
        service, _ = make_service(rows(A=["X", "Y"], B=["Y", "Z"]))
        outcome = await service.calculate(["Y", "Y"])

        assert outcome.to_dict()["stats"]["selectedFollowersCount"] == 2
        assert outcome.stats.relationships == 2

    @pytest.mark.asyncio
    async def test_restricted_run_never_persists(self):
        service, storage = make_service(rows(A=["X"]))
        await service.calculate(["nobody"])
        storage.save_scores.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_calls_are_independent(self):
        service, storage = make_service(rows(A=["X", "Y"], B=["Y", "Z"]))

        restricted, unrestricted = await asyncio.gather(
            service.calculate(["Y"]),
            service.calculate(),
        )

        assert set(restricted.scores) == {"A", "B", "Y"}
        assert set(unrestricted.scores) == {"A", "B", "X", "Y", "Z"}
        storage.save_scores.assert_awaited_once()


class TestFailuresAndEdgeCases:
    """Error taxonomy and degenerate inputs."""

    @pytest.mark.asyncio
    async def test_no_rows_gives_empty_result(self):
        service, storage = make_service([])
        outcome = await service.calculate()

        assert outcome.to_dict() == {
            "success": True,
            "scores": {},
            "stats": {"nodes": 0, "relationships": 0, "iterations": 0},
        }
        storage.save_scores.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fetch_failure_becomes_failure_outcome(self):
        source = MagicMock()
        source.fetch_rows = AsyncMock(
            side_effect=DataSourceError("connection refused", operation="fetch_rows")
        )
        service = InfluenceRankingService(source=source)

        outcome = await service.calculate()

        assert outcome.to_dict() == {
            "success": False,
            "error": "connection refused",
            "scores": {},
        }

    @pytest.mark.asyncio
    async def test_unexpected_fetch_error_becomes_failure_outcome(self):
        source = MagicMock()
        source.fetch_rows = AsyncMock(side_effect=RuntimeError("pool exhausted"))
        service = InfluenceRankingService(source=source)

        outcome = await service.calculate()

        assert outcome.to_dict() == {
            "success": False,
            "error": "pool exhausted",
            "scores": {},
        }

    @pytest.mark.asyncio
    async def test_iterations_capped_by_calculator(self):
        service, _ = make_service(
            rows(A=["B"], B=["A"], C=["B"]),
            calculator=PageRankCalculator(max_iter=4, tol=1e-30),
        )
        outcome = await service.calculate()
        assert outcome.stats.iterations == 4


class TestServiceWithDatabase:
    """End to end against SQLite."""

    @pytest.mark.asyncio
    async def test_global_scores_written_back(self, database):
        await seed_accounts(database, {
            "hub": ["a", "b", "c"],
            "a": None,
            "b": None,
        })
        service = InfluenceRankingService.from_settings(database, Settings())

        outcome = await service.calculate()

        assert outcome.success
        async with database.session() as session:
            result = await session.execute(
                select(Account.username, Account.pagerank_score).order_by(Account.username)
            )
            stored = dict(result.all())

        assert stored == {"a": 0.0, "b": 0.0, "hub": 100.0}

    @pytest.mark.asyncio
    async def test_restricted_scores_not_written(self, database):
        await seed_accounts(database, {"hub": ["a", "b"], "a": None})
        service = InfluenceRankingService.from_settings(database, Settings())

        outcome = await service.calculate(["a"])

        assert outcome.success
        async with database.session() as session:
            result = await session.execute(select(Account.pagerank_score))
            assert set(result.scalars().all()) == {None}
