"""File-level dependency graph and the algorithms that run over it."""

from repograph.graph.builder import DependencyGraph, GraphBuilder
from repograph.graph.communities import CommunityPartitioner
from repograph.graph.cycles import CycleDetector
from repograph.graph.metrics import MetricsEngine

__all__ = [
    "CommunityPartitioner",
    "CycleDetector",
    "DependencyGraph",
    "GraphBuilder",
    "MetricsEngine",
]
