"""Graph module - follower graph construction and PageRank scoring."""

from followrank.graph.builder import BuildResult, GraphBuilder
from followrank.graph.pagerank import PageRankCalculator, SolveResult
from followrank.graph.report import RankingReport, normalize_scores, top_scores
from followrank.graph.schemas import RankingOutcome, RankingStats, RelationshipRow
from followrank.graph.selection import (
    UNRESTRICTED,
    RestrictedTo,
    Selection,
    Unrestricted,
    selection_from_followers,
)
from followrank.graph.service import InfluenceRankingService
from followrank.graph.source import AccountSource
from followrank.graph.storage import RankingStorage

__all__ = [
    "AccountSource",
    "BuildResult",
    "GraphBuilder",
    "InfluenceRankingService",
    "PageRankCalculator",
    "RankingOutcome",
    "RankingReport",
    "RankingStats",
    "RankingStorage",
    "RelationshipRow",
    "RestrictedTo",
    "Selection",
    "SolveResult",
    "UNRESTRICTED",
    "Unrestricted",
    "normalize_scores",
    "selection_from_followers",
    "top_scores",
]
