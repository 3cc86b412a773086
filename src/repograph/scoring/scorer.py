"""Multi-factor file significance scoring.

Each file gets four independently capped sub-scores:

- name (0-30): best keyword category in the file name
- path (0-25): category of the nearest recognised directory
- structure (0-25): declared classes, interfaces and exported functions
- connectivity (0-20): normalized in-degree and importance from the metrics

The total is their sum, capped at 100. Files are ranked by total
descending with ties broken by path, so ranks are unique and reproducible.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict

from repograph.config import ScoringConfig
from repograph.graph.builder import DependencyGraph
from repograph.graph.metrics import MetricsReport, NodeMetrics
from repograph.graph.models import FileNode
from repograph.scoring.rules import match_rules, name_tokens, tokenize

# (points per item, cap) for each structural signal
_CLASS_POINTS = (5, 15)
_INTERFACE_POINTS = (3, 12)
_FUNCTION_POINTS = (2, 10)


class SignificanceScore(BaseModel):
    """Significance of one file and its position in the ranking."""

    model_config = ConfigDict(frozen=True)

    path: str
    name_score: float = 0.0
    path_score: float = 0.0
    structure_score: float = 0.0
    connectivity_score: float = 0.0
    total: float = 0.0
    rank: int = 0
    name_category: str = ""
    path_category: str = ""


class SignificanceScorer:
    """Scores and ranks files by structural significance."""

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config or ScoringConfig()

    def score(self, graph: DependencyGraph, metrics: MetricsReport) -> list[SignificanceScore]:
        """Score every file in the graph and return them ranked."""
        unranked = [self.score_file(node, metrics.get(node.path)) for node in graph.nodes]
        return self.rank(unranked)

    @staticmethod
    def rank(scores: list[SignificanceScore]) -> list[SignificanceScore]:
        ordered = sorted(scores, key=lambda s: (-s.total, s.path))
        return [s.model_copy(update={"rank": i}) for i, s in enumerate(ordered, start=1)]

    def score_file(self, node: FileNode, metrics: NodeMetrics | None = None) -> SignificanceScore:
        name_score, name_category = self.name_score(node.path)
        path_score, path_category = self.path_score(node.path)
        structure = self.structure_score(node)
        connectivity = self.connectivity_score(metrics)
        total = min(
            self.config.total_cap,
            name_score + path_score + structure + connectivity,
        )
        return SignificanceScore(
            path=node.path,
            name_score=name_score,
            path_score=path_score,
            structure_score=structure,
            connectivity_score=connectivity,
            total=round(total, 4),
            name_category=name_category,
            path_category=path_category,
        )

    def name_score(self, path: str) -> tuple[float, str]:
        rule = match_rules(name_tokens(PurePosixPath(path).name), self.config.name_rules)
        if rule is None:
            return 0.0, ""
        return min(float(rule.score), self.config.name_cap), rule.category

    def path_score(self, path: str) -> tuple[float, str]:
        # Nearest directory first: tests/models/x.py is scored as models
        for directory in reversed(PurePosixPath(path).parent.parts):
            rule = match_rules(tokenize(directory), self.config.path_rules)
            if rule is not None:
                return min(float(rule.score), self.config.path_cap), rule.category
        return 0.0, ""

    def structure_score(self, node: FileNode) -> float:
        total = 0
        for count, (points, cap) in (
            (node.class_count, _CLASS_POINTS),
            (node.interface_count, _INTERFACE_POINTS),
            (node.function_count, _FUNCTION_POINTS),
        ):
            total += min(max(count, 0) * points, cap)
        return float(min(total, self.config.structure_cap))

    def connectivity_score(self, metrics: NodeMetrics | None) -> float:
        if metrics is None:
            return 0.0
        half = self.config.connectivity_cap / 2
        raw = half * metrics.normalized_in_degree + half * metrics.normalized_importance
        return round(min(raw, self.config.connectivity_cap), 4)
