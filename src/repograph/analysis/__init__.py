"""Full analysis pipeline: graph, metrics, cycles, clusters, scores, budget."""

from repograph.analysis.engine import RepositoryAnalyzer, analyze
from repograph.analysis.models import AnalysisInput, AnalysisResult

__all__ = ["AnalysisInput", "AnalysisResult", "RepositoryAnalyzer", "analyze"]
