"""Build an immutable file-level dependency graph from import edges."""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Iterable, Iterator

import networkx as nx

from repograph.exceptions import GraphError
from repograph.graph.models import BuildStats, Edge, FileNode, ImportEdge, SourceFile

logger = logging.getLogger("repograph.graph")

# ImportEdge, (source, target) or (source, target, weight)
EdgeInput = ImportEdge | tuple[str, str | None] | tuple[str, str | None, int]


def normalize_path(path: str) -> str:
    """Normalize a file identity to a forward-slash relative path."""
    normalized = posixpath.normpath(path.replace("\\", "/"))
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


class DependencyGraph:
    """Read-only directed graph of files and their imports.

    Wraps a frozen ``networkx.DiGraph`` whose nodes are normalized paths.
    Node order is the order files were supplied; each node's successor and
    predecessor lists follow edge insertion order, so iteration is
    reproducible for identical inputs.
    """

    def __init__(
        self,
        graph: nx.DiGraph,
        nodes: dict[str, FileNode],
        stats: BuildStats,
    ) -> None:
        self.graph = nx.freeze(graph)
        self._nodes = nodes
        self.stats = stats

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    @property
    def paths(self) -> list[str]:
        return list(self._nodes)

    @property
    def nodes(self) -> list[FileNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> list[Edge]:
        return [
            Edge(source=u, target=v, weight=data.get("weight", 1))
            for u, v, data in self.graph.edges(data=True)
        ]

    def node(self, path: str) -> FileNode:
        try:
            return self._nodes[path]
        except KeyError:
            raise GraphError(f"File not in graph: {path}") from None

    def successors(self, path: str) -> list[str]:
        """Files imported by ``path`` (forward adjacency)."""
        return list(self.graph.successors(path))

    def predecessors(self, path: str) -> list[str]:
        """Files importing ``path`` (reverse adjacency)."""
        return list(self.graph.predecessors(path))

    def in_degree(self, path: str) -> int:
        return self.graph.in_degree(path)

    def out_degree(self, path: str) -> int:
        return self.graph.out_degree(path)

    def has_edge(self, source: str, target: str) -> bool:
        return self.graph.has_edge(source, target)

    def edge_weight(self, source: str, target: str) -> int:
        if not self.graph.has_edge(source, target):
            return 0
        return self.graph.edges[source, target].get("weight", 1)

    def number_of_edges(self) -> int:
        return self.graph.number_of_edges()

    def is_empty(self) -> bool:
        return not self._nodes


class GraphBuilder:
    """Builds a :class:`DependencyGraph` from discovered files and import edges.

    Every edge endpoint in the result is a discovered file. Edges whose
    source is unknown are dropped; edges whose target is unknown or
    explicitly unresolved are counted as unresolved imports and dropped.
    Neither case is an error.
    """

    def build(
        self,
        files: Iterable[SourceFile | str],
        edges: Iterable[EdgeInput] = (),
    ) -> DependencyGraph:
        """Build the graph.

        Args:
            files: Discovered files, as ``SourceFile`` records or bare paths.
            edges: Import edges, as ``ImportEdge`` records or
                ``(source, target)`` pairs or ``(source, target, weight)``
                triples. A ``None`` target marks an unresolved import.

        Returns:
            The frozen dependency graph with its build statistics.
        """
        graph = nx.DiGraph()
        nodes: dict[str, FileNode] = {}
        duplicate_files = 0

        for item in files:
            node = self._to_node(item)
            if node.path in nodes:
                duplicate_files += 1
                continue
            nodes[node.path] = node
            graph.add_node(node.path)

        total = retained = unknown_source = unresolved = self_loops = 0

        for item in edges:
            edge = self._to_edge(item)
            total += 1

            source = normalize_path(edge.source)
            if source not in nodes:
                unknown_source += 1
                continue

            target = normalize_path(edge.target) if edge.target is not None else None
            if target is None or target not in nodes:
                unresolved += 1
                continue

            retained += 1
            if graph.has_edge(source, target):
                graph.edges[source, target]["weight"] += edge.weight
            else:
                graph.add_edge(source, target, kind="import", weight=edge.weight)
                if source == target:
                    self_loops += 1

        dropped = unknown_source + unresolved
        stats = BuildStats(
            total_files=len(nodes),
            total_edges=total,
            retained_edges=retained,
            dropped_edges=dropped,
            unknown_source_edges=unknown_source,
            unresolved_imports=unresolved,
            duplicate_files=duplicate_files,
            unique_edges=graph.number_of_edges(),
            self_loops=self_loops,
        )

        if dropped:
            logger.info(
                "Dropped %d of %d edges (%d unknown source, %d unresolved target)",
                dropped, total, unknown_source, unresolved,
            )
        logger.debug(
            "Built dependency graph: %d files, %d edges", len(nodes), graph.number_of_edges()
        )

        return DependencyGraph(graph, nodes, stats)

    @staticmethod
    def _to_node(item: SourceFile | str) -> FileNode:
        if isinstance(item, str):
            return FileNode(path=normalize_path(item))
        return FileNode(
            path=normalize_path(item.path),
            size=item.size,
            language=item.language,
            class_count=item.class_count,
            interface_count=item.interface_count,
            function_count=item.function_count,
            import_count=item.import_count,
        )

    @staticmethod
    def _to_edge(item: EdgeInput) -> ImportEdge:
        if isinstance(item, ImportEdge):
            return item
        if len(item) == 3:
            source, target, weight = item
            return ImportEdge(source=source, target=target, weight=weight)
        source, target = item
        return ImportEdge(source=source, target=target)
