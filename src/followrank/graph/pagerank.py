"""PageRank calculation for influence scoring."""

from __future__ import annotations

from dataclasses import dataclass

import networkx as nx

from followrank.core import GraphError, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SolveResult:
    """Raw PageRank scores and how the iteration ended."""

    scores: dict[str, float]
    iterations: int
    converged: bool


class PageRankCalculator:
    """Damped power iteration over a follower graph.

    Dangling nodes (no out-links) do not redistribute their score, so the
    total mass can drop below 1.
    """

    DEFAULT_DAMPING = 0.85
    DEFAULT_MAX_ITER = 50
    DEFAULT_TOL = 1e-06

    def __init__(
        self,
        damping: float = DEFAULT_DAMPING,
        max_iter: int = DEFAULT_MAX_ITER,
        tol: float = DEFAULT_TOL,
    ) -> None:
        """Initialize PageRank calculator.

        Args:
            damping: Probability of following a link.
            max_iter: Maximum number of iterations.
            tol: Convergence tolerance on the summed absolute change.
        """
        if not 0.0 < damping < 1.0:
            raise ValueError(f"damping must be between 0 and 1, got {damping}")
        if max_iter < 1:
            raise ValueError(f"max_iter must be positive, got {max_iter}")
        if tol <= 0:
            raise ValueError(f"tol must be positive, got {tol}")

        self._damping = damping
        self._max_iter = max_iter
        self._tol = tol

    @property
    def max_iter(self) -> int:
        return self._max_iter

    def solve(self, graph: nx.DiGraph) -> SolveResult:
        """Compute raw PageRank scores for every node.

        Args:
            graph: Directed graph, edges point from follower to followed.

        Returns:
            SolveResult with a score per node and the iterations executed.

        Raises:
            GraphError: If the computation fails.
        """
        n = graph.number_of_nodes()
        if n == 0:
            logger.warning("Empty graph provided for PageRank computation")
            return SolveResult(scores={}, iterations=0, converged=True)

        try:
            nodes = list(graph.nodes())
            scores = dict.fromkeys(nodes, 1.0 / n)
            base = (1.0 - self._damping) / n

            iterations = 0
            converged = False
            for iteration in range(1, self._max_iter + 1):
                next_scores = dict.fromkeys(nodes, base)

                # Reads come from the previous snapshot only.
                for node in nodes:
                    out_degree = graph.out_degree(node)
                    if out_degree == 0:
                        continue
                    contribution = self._damping * scores[node] / out_degree
                    for neighbor in graph.successors(node):
                        next_scores[neighbor] += contribution

                total_diff = sum(abs(next_scores[v] - scores[v]) for v in nodes)
                scores = next_scores
                iterations = iteration

                if total_diff < self._tol:
                    converged = True
                    break

        except Exception as e:
            logger.error(f"PageRank computation failed: {e}")
            raise GraphError(
                f"PageRank computation failed: {e}",
                node_count=n,
                edge_count=graph.number_of_edges(),
            ) from e

        if converged:
            logger.info(f"PageRank converged after {iterations} iterations")
        else:
            logger.warning(
                f"PageRank stopped at the iteration cap ({self._max_iter}) without converging"
            )

        return SolveResult(scores=scores, iterations=iterations, converged=converged)
