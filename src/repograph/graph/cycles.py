"""Circular dependency detection via strongly connected components."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field

from repograph.graph.builder import DependencyGraph

logger = logging.getLogger("repograph.cycles")


class CycleGroup(BaseModel):
    """Files that all reach each other through imports.

    Members are listed in depth-first discovery order.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    members: list[str] = Field(default_factory=list)
    self_loop: bool = False

    @property
    def size(self) -> int:
        return len(self.members)


class CycleDetector:
    """Tarjan's strongly connected components over a :class:`DependencyGraph`.

    The traversal is iterative so deep import chains cannot hit the
    recursion limit. Roots are visited in graph node order and successors
    in edge insertion order, which makes the output reproducible.
    """

    def detect(self, graph: DependencyGraph) -> list[CycleGroup]:
        """Report every component of more than one file as a cycle group.

        A single file is reported only when it imports itself.
        """
        discovery: dict[str, int] = {}
        components = list(self._tarjan(graph, discovery))

        cyclic = [
            comp for comp in components
            if len(comp) > 1 or graph.has_edge(comp[0], comp[0])
        ]
        cyclic.sort(key=lambda comp: discovery[comp[0]])

        groups = [
            CycleGroup(id=i, members=comp, self_loop=len(comp) == 1)
            for i, comp in enumerate(cyclic)
        ]
        if groups:
            logger.debug(
                "Found %d cycle groups covering %d files",
                len(groups), sum(g.size for g in groups),
            )
        return groups

    def strongly_connected_components(self, graph: DependencyGraph) -> list[list[str]]:
        """All components, singletons included, in completion order."""
        return list(self._tarjan(graph, {}))

    @staticmethod
    def _tarjan(graph: DependencyGraph, index: dict[str, int]) -> Iterator[list[str]]:
        lowlink: dict[str, int] = {}
        stack: list[str] = []
        on_stack: set[str] = set()
        counter = 0

        def visit(node: str) -> Iterator[str]:
            nonlocal counter
            index[node] = lowlink[node] = counter
            counter += 1
            stack.append(node)
            on_stack.add(node)
            return iter(graph.successors(node))

        for root in graph.paths:
            if root in index:
                continue
            work: list[tuple[str, Iterator[str]]] = [(root, visit(root))]

            while work:
                node, successors = work[-1]
                descended = False
                for succ in successors:
                    if succ not in index:
                        work.append((succ, visit(succ)))
                        descended = True
                        break
                    if succ in on_stack:
                        lowlink[node] = min(lowlink[node], index[succ])
                if descended:
                    continue

                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node])

                if lowlink[node] == index[node]:
                    component: list[str] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.append(member)
                        if member == node:
                            break
                    component.sort(key=index.__getitem__)
                    yield component
