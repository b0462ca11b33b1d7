"""Influence ranking pipeline: fetch, build, solve, normalize, persist."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from followrank.core import FollowRankError, PersistenceError, Settings, get_logger
from followrank.graph.builder import GraphBuilder
from followrank.graph.pagerank import PageRankCalculator
from followrank.graph.report import RankingReport, normalize_scores
from followrank.graph.schemas import RankingOutcome, RankingStats
from followrank.graph.selection import Selection, selection_from_followers
from followrank.graph.source import AccountSource
from followrank.graph.storage import DEFAULT_BATCH_SIZE, RankingStorage
from followrank.storage import Database

logger = get_logger(__name__)


class InfluenceRankingService:
    """Compute PageRank influence scores over the follower graph.

    The service holds only its collaborators. Graph and score state live
    inside a single ``calculate`` call, so concurrent calls do not interact.
    """

    def __init__(
        self,
        source: AccountSource,
        storage: RankingStorage | None = None,
        builder: GraphBuilder | None = None,
        calculator: PageRankCalculator | None = None,
        top_n: int = 10,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        """Initialize the ranking service.

        Args:
            source: Supplier of relationship rows.
            storage: Writer for global scores; ``None`` disables write-back.
            builder: Optional graph builder instance.
            calculator: Optional PageRank calculator instance.
            top_n: Number of accounts in the logged summary.
            batch_size: Accounts per persistence batch.
        """
        self._source = source
        self._storage = storage
        self._builder = builder or GraphBuilder()
        self._calculator = calculator or PageRankCalculator()
        self._top_n = top_n
        self._batch_size = batch_size

    @classmethod
    def from_settings(cls, database: Database, settings: Settings) -> InfluenceRankingService:
        """Wire a service against one database using configured constants."""
        return cls(
            source=AccountSource(database),
            storage=RankingStorage(database),
            calculator=PageRankCalculator(
                damping=settings.pagerank_damping,
                max_iter=settings.pagerank_max_iter,
                tol=settings.pagerank_tol,
            ),
            top_n=settings.report_top_n,
            batch_size=settings.persist_batch_size,
        )

    async def calculate(
        self,
        selected_followers: Iterable[str] | None = None,
    ) -> RankingOutcome:
        """Run one ranking computation.

        Args:
            selected_followers: Follower handles allowed to contribute edges.
                ``None`` or empty computes (and persists) the global ranking.

        Returns:
            RankingOutcome; ``success`` is False when fetching or computing
            raised. Persistence failures never change the outcome.
        """
        selection = selection_from_followers(selected_followers)

        with structlog.contextvars.bound_contextvars(selected_followers=selection.describe()):
            logger.info("PageRank calculation requested")
            try:
                return await self._run(selection)
            except FollowRankError as e:
                logger.error(f"PageRank calculation error: {e}")
                return RankingOutcome.failure(e.message)
            except Exception as e:
                logger.exception(f"Unexpected PageRank calculation error: {e}")
                return RankingOutcome.failure(str(e))

    async def _run(self, selection: Selection) -> RankingOutcome:
        rows = await self._source.fetch_rows()
        built = self._builder.build(rows, selection)

        if built.node_count == 0:
            logger.info("No accounts with relationships, returning empty ranking")
            return RankingOutcome.empty()

        solved = self._calculator.solve(built.graph)
        scores = normalize_scores(solved.scores)

        report = RankingReport.build(
            scores,
            relationships=built.relationship_count,
            iterations=solved.iterations,
            converged=solved.converged,
            top_n=self._top_n,
        )
        report.log(logger)

        if selection.is_global:
            await self._persist(scores)

        return RankingOutcome(
            success=True,
            scores=scores,
            stats=RankingStats(
                nodes=report.nodes,
                relationships=report.relationships,
                iterations=report.iterations,
                selected_followers_count=selection.describe(),
            ),
        )

    async def _persist(self, scores: dict[str, float]) -> None:
        """Best-effort write-back of global scores; failures only warn."""
        if self._storage is None:
            return
        try:
            await self._storage.save_scores(scores, batch_size=self._batch_size)
        except PersistenceError as e:
            logger.warning(f"PageRank persistence warning: {e.message}", **e.details)
        except Exception as e:
            logger.warning(f"PageRank persistence warning: {e}")
