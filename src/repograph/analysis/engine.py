"""End-to-end analysis pipeline.

edges -> graph -> {metrics, cycles, communities} -> scores -> budgeted selection

Every stage reads the frozen graph and nothing downstream writes back, so
the run is a pure function of its inputs: identical files, edges and
budget give an identical :class:`AnalysisResult`.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from repograph.analysis.models import AnalysisInput, AnalysisResult
from repograph.config import ProjectConfig
from repograph.context.budgeter import ContextBudgeter
from repograph.context.models import BudgetCandidate, TokenEstimator
from repograph.context.truncation import detect_language
from repograph.graph.builder import DependencyGraph, EdgeInput, GraphBuilder, normalize_path
from repograph.graph.communities import CommunityPartitioner
from repograph.graph.cycles import CycleDetector
from repograph.graph.metrics import MetricsEngine
from repograph.graph.models import SourceFile
from repograph.scoring.categories import (
    cluster_by_domain,
    is_config_file,
    is_entry_point,
    is_schema_file,
    language_breakdown,
)
from repograph.scoring.layers import cluster_by_directory, cluster_by_layer
from repograph.scoring.scorer import SignificanceScore, SignificanceScorer

logger = logging.getLogger("repograph.analysis")

STAGES = ("graph", "metrics", "cycles", "communities", "scoring", "budget", "complete")


class RepositoryAnalyzer:
    """Runs the whole pipeline with one explicit configuration.

    Usage:
        analyzer = RepositoryAnalyzer(config)
        result = analyzer.analyze(files, edges, token_budget=8000)
        print(result.selection.render())
    """

    def __init__(
        self,
        config: ProjectConfig | None = None,
        token_counter: Callable[[str], int] | None = None,
    ) -> None:
        self.config = config or ProjectConfig()
        self.token_counter = token_counter or TokenEstimator.estimate
        self.builder = GraphBuilder()
        self.metrics_engine = MetricsEngine(self.config.metrics)
        self.cycle_detector = CycleDetector()
        self.partitioner = CommunityPartitioner(self.config.community)
        self.scorer = SignificanceScorer(self.config.scoring)
        self.budgeter = ContextBudgeter(self.config.budget, self.token_counter)

    def analyze(
        self,
        files: Iterable[SourceFile | str],
        edges: Iterable[EdgeInput] = (),
        token_budget: int | None = None,
        progress_callback: Callable[[str], None] | None = None,
    ) -> AnalysisResult:
        """Analyze a file set and its import edges.

        Args:
            files: Discovered files.
            edges: Resolved (or explicitly unresolved) import edges.
            token_budget: Overrides ``config.budget.token_budget``.
            progress_callback: Optional callback(stage) for each stage.

        Returns:
            The complete, possibly empty, analysis result.
        """
        start_time = time.time()

        def progress(stage: str) -> None:
            if progress_callback is not None:
                progress_callback(stage)

        files = [SourceFile(path=f) if isinstance(f, str) else f for f in files]

        progress("graph")
        graph = self.builder.build(files, edges)

        progress("metrics")
        metrics = self.metrics_engine.compute(graph)

        progress("cycles")
        cycles = self.cycle_detector.detect(graph)

        progress("communities")
        partition = self.partitioner.partition(graph)

        progress("scoring")
        scores = self.scorer.score(graph, metrics)

        progress("budget")
        candidates = self.build_candidates(graph, scores, files)
        selection = self.budgeter.select(candidates, token_budget)

        limit = self.config.scoring.high_value_limit
        high_value = [s.path for s in scores if s.total > 0][:limit]
        paths = sorted(graph.paths)
        name_rules = self.config.scoring.name_rules

        result = AnalysisResult(
            nodes=graph.nodes,
            edges=graph.edges,
            build=graph.stats,
            metrics=metrics,
            cycles=cycles,
            partition=partition,
            scores=scores,
            selection=selection,
            layers=cluster_by_layer(paths),
            directories=cluster_by_directory(paths),
            domains=cluster_by_domain(paths),
            languages=language_breakdown(graph.nodes),
            entry_points=[p for p in paths if is_entry_point(p)],
            schema_files=[p for p in paths if is_schema_file(p, name_rules)],
            config_files=[p for p in paths if is_config_file(p, name_rules)],
            high_value_files=high_value,
        )
        progress("complete")

        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            "Analyzed %d files: %d cycles, %d communities, %d/%d tokens selected in %.1fms",
            len(graph), len(cycles), len(partition.communities),
            selection.total_tokens, selection.token_budget, elapsed_ms,
        )
        return result

    def analyze_input(
        self,
        data: AnalysisInput,
        token_budget: int | None = None,
        progress_callback: Callable[[str], None] | None = None,
    ) -> AnalysisResult:
        return self.analyze(data.files, data.edges, token_budget, progress_callback)

    def build_candidates(
        self,
        graph: DependencyGraph,
        scores: list[SignificanceScore],
        files: list[SourceFile],
    ) -> list[BudgetCandidate]:
        """Pair ranked scores with each file's token count and content."""
        by_path: dict[str, SourceFile] = {}
        for f in files:
            by_path.setdefault(normalize_path(f.path), f)

        candidates = []
        for score in scores:
            source = by_path[score.path]
            node = graph.node(score.path)
            candidates.append(
                BudgetCandidate(
                    path=score.path,
                    rank=score.rank,
                    score=score.total,
                    tokens=self.token_count(source),
                    language=node.language or detect_language(score.path),
                    content=source.content,
                )
            )
        return candidates

    def token_count(self, source: SourceFile) -> int:
        if source.token_count is not None:
            return source.token_count
        if source.content is not None:
            return self.token_counter(source.content)
        return TokenEstimator.estimate_bytes(source.size)


def analyze(
    files: Iterable[SourceFile | str],
    edges: Iterable[EdgeInput] = (),
    token_budget: int | None = None,
    config: ProjectConfig | None = None,
) -> AnalysisResult:
    """Convenience wrapper around :class:`RepositoryAnalyzer`."""
    return RepositoryAnalyzer(config).analyze(files, edges, token_budget)
