"""Domain clustering by Louvain-style modularity optimization.

The directed import graph is folded into an undirected affinity graph:
the weight of a file pair is the sum of its import weights in both
directions plus code-specific bonuses when the two files

- live in the same directory,
- share a naming role (``user.service.ts`` / ``order_service.py``),
- import each other.

Optimization alternates two phases until a pass merges nothing:

1. Local moves. Every node starts in its own community and is moved to
   the neighbouring community with the largest modularity gain, repeating
   until a full sweep makes no move.
2. Aggregation. Each community collapses into a super-node whose
   internal weight becomes a self-loop and whose external weights are
   summed.

Louvain is order-sensitive, so the visit order is fixed: level 0 visits
files sorted by path, later levels visit super-nodes in the order of their
lexically smallest member.
"""

from __future__ import annotations

import logging
from collections import Counter

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field

from repograph.config import CommunityConfig
from repograph.graph.builder import DependencyGraph
from repograph.graph.models import FileNode
from repograph.scoring.rules import name_tokens

logger = logging.getLogger("repograph.communities")


class Community(BaseModel):
    """A cluster of files; members sorted by path."""

    model_config = ConfigDict(frozen=True)

    id: int
    label: str = ""
    members: list[str] = Field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)


class Partition(BaseModel):
    """A partition of every graph node into exactly one community."""

    model_config = ConfigDict(frozen=True)

    communities: list[Community] = Field(default_factory=list)
    modularity: float = 0.0
    levels: int = 0

    def membership(self) -> dict[str, int]:
        """Map each file path to its community id."""
        return {path: c.id for c in self.communities for path in c.members}

    def community_of(self, path: str) -> Community | None:
        for community in self.communities:
            if path in community.members:
                return community
        return None


def naming_role(path: str) -> str | None:
    """The trailing role token of a file name, if it has one.

    ``user.service.ts`` and ``OrderService.java`` both give ``service``;
    single-word names like ``utils.py`` have no role.
    """
    tokens = name_tokens(FileNode(path=path).name)
    if len(tokens) < 2:
        return None
    return tokens[-1]


class CommunityPartitioner:
    """Partitions files into cohesive domain clusters."""

    def __init__(self, config: CommunityConfig | None = None) -> None:
        self.config = config or CommunityConfig()

    def partition(self, graph: DependencyGraph) -> Partition:
        if graph.is_empty():
            return Partition()

        base = self.affinity_graph(graph)
        working = base
        membership: dict[str, int | str] = {path: path for path in base}
        levels = 0

        for _ in range(self.config.max_levels):
            assignment = self._local_moves(working)
            if len(set(assignment.values())) == working.number_of_nodes():
                break
            levels += 1
            working, renumber = self._aggregate(working, assignment)
            membership = {
                path: renumber[assignment[node]] for path, node in membership.items()
            }

        groups: dict[int | str, list[str]] = {}
        for path in base:
            groups.setdefault(membership[path], []).append(path)

        ordered = sorted(groups.values(), key=lambda members: (-len(members), members[0]))
        communities = [
            Community(id=i, label=self._label(members), members=members)
            for i, members in enumerate(ordered)
        ]

        modularity = 0.0
        if base.number_of_edges() > 0:
            modularity = nx.community.modularity(
                base, [set(c.members) for c in communities], weight="weight"
            )

        logger.debug(
            "Partitioned %d files into %d communities over %d levels (Q=%.4f)",
            len(graph), len(communities), levels, modularity,
        )
        return Partition(communities=communities, modularity=modularity, levels=levels)

    def affinity_graph(self, graph: DependencyGraph) -> nx.Graph:
        """Undirected weighted graph with affinity bonuses folded in.

        Self-imports carry no clustering signal and are left out.
        """
        pair_weights: dict[tuple[str, str], float] = {}
        for edge in graph.edges:
            if edge.source == edge.target:
                continue
            pair = tuple(sorted((edge.source, edge.target)))
            pair_weights[pair] = pair_weights.get(pair, 0.0) + edge.weight

        affinity = nx.Graph()
        affinity.add_nodes_from(sorted(graph.paths))
        for a, b in sorted(pair_weights):
            weight = pair_weights[(a, b)] + self.affinity_bonus(graph, a, b)
            affinity.add_edge(a, b, weight=weight)
        return affinity

    def affinity_bonus(self, graph: DependencyGraph, a: str, b: str) -> float:
        """Extra weight for a connected pair of files."""
        bonus = 0.0
        if graph.node(a).directory == graph.node(b).directory:
            bonus += self.config.same_directory_bonus
        role = naming_role(a)
        if role is not None and role == naming_role(b):
            bonus += self.config.naming_pattern_bonus
        if graph.has_edge(a, b) and graph.has_edge(b, a):
            bonus += self.config.bidirectional_bonus
        return bonus

    def _local_moves(self, g: nx.Graph) -> dict:
        """Greedy modularity moves in fixed node order until stable."""
        community = {node: node for node in g}
        m2 = 2.0 * g.size(weight="weight")
        if m2 == 0:
            return community

        degree = dict(g.degree(weight="weight"))
        totals = dict(degree)
        order = list(g.nodes)

        moved = True
        while moved:
            moved = False
            for node in order:
                current = community[node]
                k = degree[node]

                links: dict = {}
                for nbr, data in g[node].items():
                    if nbr == node:
                        continue
                    c = community[nbr]
                    links[c] = links.get(c, 0.0) + data.get("weight", 1.0)

                totals[current] -= k
                best = current
                best_gain = links.get(current, 0.0) - totals[current] * k / m2
                for c, weight in links.items():
                    gain = weight - totals[c] * k / m2
                    if gain > best_gain + self.config.min_gain:
                        best, best_gain = c, gain
                totals[best] += k

                if best != current:
                    community[node] = best
                    moved = True

        return community

    @staticmethod
    def _aggregate(g: nx.Graph, assignment: dict) -> tuple[nx.Graph, dict]:
        """Collapse communities into super-nodes numbered by first appearance."""
        renumber: dict = {}
        for node in g:
            renumber.setdefault(assignment[node], len(renumber))

        coarse = nx.Graph()
        coarse.add_nodes_from(range(len(renumber)))
        for u, v, data in g.edges(data=True):
            cu = renumber[assignment[u]]
            cv = renumber[assignment[v]]
            weight = data.get("weight", 1.0)
            if coarse.has_edge(cu, cv):
                coarse[cu][cv]["weight"] += weight
            else:
                coarse.add_edge(cu, cv, weight=weight)
        return coarse, renumber

    @staticmethod
    def _label(members: list[str]) -> str:
        directories = Counter(FileNode(path=p).directory for p in members)
        best = max(directories.values())
        return min(d for d, count in directories.items() if count == best)
