"""Build a directed follower graph from relationship rows."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import networkx as nx

from followrank.core import get_logger
from followrank.graph.schemas import RelationshipRow
from followrank.graph.selection import UNRESTRICTED, Selection

logger = get_logger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """Graph produced by the builder plus the number of edges it accepted."""

    graph: nx.DiGraph
    relationship_count: int

    @property
    def node_count(self) -> int:
        return self.graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self.graph.number_of_edges()


class GraphBuilder:
    """Build a directed graph where each edge points from follower to followed."""

    def build(
        self,
        rows: Iterable[RelationshipRow],
        selection: Selection = UNRESTRICTED,
    ) -> BuildResult:
        """Build the follower graph.

        Every row's account becomes a node. Each follower allowed by the
        selection adds an edge follower -> account and counts as one
        relationship, duplicates included. Self-loops are kept.

        Args:
            rows: Relationship rows from the account store.
            selection: Which followers may contribute edges.

        Returns:
            BuildResult with the graph and relationship count.
        """
        rows = list(rows)
        graph = nx.DiGraph()

        for row in rows:
            graph.add_node(row.username)

        relationship_count = 0
        for row in rows:
            for follower in row.followed_by:
                if not selection.allows(follower):
                    continue
                relationship_count += 1
                graph.add_edge(follower, row.username)

        logger.info(f"{relationship_count} relationships processed")
        logger.info(
            f"Built graph with {graph.number_of_nodes()} nodes "
            f"and {graph.number_of_edges()} edges"
        )

        return BuildResult(graph=graph, relationship_count=relationship_count)
