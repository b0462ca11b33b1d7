"""Score normalization and ranking summaries."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

SCALE_MAX = 100.0


def normalize_scores(raw: Mapping[str, float], scale: float = SCALE_MAX) -> dict[str, float]:
    """Min-max rescale scores onto [0, scale].

    When every score is identical (including empty and single-node inputs)
    the scores are returned unchanged.
    """
    if not raw:
        return {}

    max_score = max(raw.values())
    min_score = min(raw.values())
    score_range = max_score - min_score

    if score_range <= 0:
        return dict(raw)

    return {
        account: (score - min_score) / score_range * scale
        for account, score in raw.items()
    }


def top_scores(scores: Mapping[str, float], k: int = 10) -> list[tuple[str, float]]:
    """Top k accounts by score descending; ties keep enumeration order."""
    return sorted(scores.items(), key=lambda item: item[1], reverse=True)[:k]


@dataclass(frozen=True)
class RankingReport:
    """Summary of one ranking computation."""

    nodes: int
    relationships: int
    iterations: int
    converged: bool
    top: list[tuple[str, float]] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        scores: Mapping[str, float],
        relationships: int,
        iterations: int,
        converged: bool,
        top_n: int = 10,
    ) -> RankingReport:
        return cls(
            nodes=len(scores),
            relationships=relationships,
            iterations=iterations,
            converged=converged,
            top=top_scores(scores, top_n),
        )

    def log(self, logger: Any) -> None:
        """Emit the summary and the top accounts."""
        logger.info(
            "Ranking summary",
            nodes=self.nodes,
            relationships=self.relationships,
            iterations=self.iterations,
            converged=self.converged,
        )
        logger.info(
            f"Top {len(self.top)} PageRank scores",
            top=[f"{account}: {score:.2f}" for account, score in self.top],
        )
