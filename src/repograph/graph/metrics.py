"""Connectivity metrics over the dependency graph.

Importance is a PageRank-style fixed point::

    importance(v) = (1 - d) + d * (sum(importance(u) / out(u) for u -> v) + dangling / N)

with every node starting at 1/N. ``dangling`` is the total importance held
by nodes with no outgoing edges, spread evenly over all nodes so no mass
leaks out of the graph. Iteration stops at ``max_iterations`` or when the
largest per-node change drops below ``epsilon``; the values reached at the
cap are returned either way.

Betweenness uses networkx shortest-path counting on unweighted edges. Up
to ``betweenness_exact_limit`` nodes it is exact; above that it samples
``betweenness_samples`` source nodes with a fixed seed, so the estimate is
still reproducible.
"""

from __future__ import annotations

import logging

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field

from repograph.config import MetricsConfig
from repograph.graph.builder import DependencyGraph

logger = logging.getLogger("repograph.metrics")


class NodeMetrics(BaseModel):
    """Connectivity metrics for a single file."""

    model_config = ConfigDict(frozen=True)

    path: str
    in_degree: int = 0
    out_degree: int = 0
    importance: float = 0.0
    betweenness: float = 0.0
    normalized_in_degree: float = 0.0  # in_degree / max in_degree
    normalized_importance: float = 0.0  # min-max scaled importance


class MetricsReport(BaseModel):
    """Per-node metrics plus diagnostics about how they were computed."""

    model_config = ConfigDict(frozen=True)

    nodes: dict[str, NodeMetrics] = Field(default_factory=dict)
    iterations: int = 0
    converged: bool = True
    betweenness_sampled: bool = False
    betweenness_sources: int = 0

    def get(self, path: str) -> NodeMetrics | None:
        return self.nodes.get(path)

    def top_by_importance(self, limit: int = 10) -> list[NodeMetrics]:
        ranked = sorted(self.nodes.values(), key=lambda m: (-m.importance, m.path))
        return ranked[:limit]


class MetricsEngine:
    """Computes degree, importance and betweenness for every file."""

    def __init__(self, config: MetricsConfig | None = None) -> None:
        self.config = config or MetricsConfig()

    def compute(self, graph: DependencyGraph) -> MetricsReport:
        if graph.is_empty():
            return MetricsReport()

        importance, iterations, converged = self.importance(graph)
        betweenness, sampled, sources = self.betweenness(graph)

        in_degrees = {p: graph.in_degree(p) for p in graph}
        max_in = max(in_degrees.values())
        lo = min(importance.values())
        hi = max(importance.values())
        spread = hi - lo

        nodes: dict[str, NodeMetrics] = {}
        for path in graph:
            nodes[path] = NodeMetrics(
                path=path,
                in_degree=in_degrees[path],
                out_degree=graph.out_degree(path),
                importance=importance[path],
                betweenness=betweenness.get(path, 0.0),
                normalized_in_degree=in_degrees[path] / max_in if max_in else 0.0,
                normalized_importance=(importance[path] - lo) / spread if spread > 0 else 0.0,
            )

        return MetricsReport(
            nodes=nodes,
            iterations=iterations,
            converged=converged,
            betweenness_sampled=sampled,
            betweenness_sources=sources,
        )

    def importance(self, graph: DependencyGraph) -> tuple[dict[str, float], int, bool]:
        """Run the damped importance iteration.

        Returns:
            (scores, iterations_run, converged)
        """
        paths = graph.paths
        n = len(paths)
        if n == 0:
            return {}, 0, True

        d = self.config.damping
        out_degree = {p: graph.out_degree(p) for p in paths}
        incoming = {p: sorted(graph.predecessors(p)) for p in paths}
        dangling_nodes = sorted(p for p in paths if out_degree[p] == 0)

        scores = {p: 1.0 / n for p in paths}
        iterations = 0
        converged = False

        for iterations in range(1, self.config.max_iterations + 1):
            dangling_share = sum(scores[p] for p in dangling_nodes) / n
            new_scores: dict[str, float] = {}
            for v in paths:
                rank_sum = 0.0
                for u in incoming[v]:
                    rank_sum += scores[u] / out_degree[u]
                new_scores[v] = (1.0 - d) + d * (rank_sum + dangling_share)

            delta = max(abs(new_scores[p] - scores[p]) for p in paths)
            scores = new_scores
            if delta < self.config.epsilon:
                converged = True
                break

        if not converged:
            logger.debug(
                "Importance did not converge within %d iterations (epsilon=%g); "
                "using values at the cap",
                self.config.max_iterations, self.config.epsilon,
            )

        return scores, iterations, converged

    def betweenness(self, graph: DependencyGraph) -> tuple[dict[str, float], bool, int]:
        """Compute normalized betweenness centrality.

        Returns:
            (scores, sampled, source_count)
        """
        n = len(graph)
        if n == 0:
            return {}, False, 0

        if n <= self.config.betweenness_exact_limit:
            return nx.betweenness_centrality(graph.graph, normalized=True), False, n

        k = min(self.config.betweenness_samples, n)
        logger.debug("Sampling %d of %d sources for betweenness", k, n)
        scores = nx.betweenness_centrality(
            graph.graph, k=k, normalized=True, seed=self.config.betweenness_seed
        )
        # Source sampling rescales by n/k, which can overshoot 1
        return {p: min(1.0, s) for p, s in scores.items()}, True, k
