"""Input and result models for a full analysis run."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from repograph.context.models import BudgetSelection
from repograph.exceptions import InputError
from repograph.graph.communities import Partition
from repograph.graph.cycles import CycleGroup
from repograph.graph.metrics import MetricsReport
from repograph.graph.models import BuildStats, Edge, FileNode, ImportEdge, SourceFile
from repograph.scoring.categories import LanguageStat
from repograph.scoring.scorer import SignificanceScore


class AnalysisInput(BaseModel):
    """The file set and edge list supplied by upstream scanners.

    Edges may be objects (``{"source", "target", "weight"}``) or
    ``[source, target]`` / ``[source, target, weight]`` lists; a null
    target marks an unresolved import.
    """

    files: list[SourceFile] = Field(default_factory=list)
    edges: list[ImportEdge] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, source: str = "<input>") -> AnalysisInput:
        if not isinstance(data, dict):
            raise InputError(source, "expected a JSON object")
        if "files" not in data:
            raise InputError(source, "missing 'files'")

        files = [{"path": f} if isinstance(f, str) else f for f in data["files"]]
        edges = []
        for item in data.get("edges", []):
            if isinstance(item, (list, tuple)):
                if len(item) not in (2, 3):
                    raise InputError(source, f"edge must have 2 or 3 items: {item!r}")
                edge = {"source": item[0], "target": item[1]}
                if len(item) == 3:
                    edge["weight"] = item[2]
                edges.append(edge)
            else:
                edges.append(item)

        try:
            return cls(files=files, edges=edges)
        except ValidationError as e:
            raise InputError(source, str(e)) from e

    @classmethod
    def from_file(cls, path: str | Path) -> AnalysisInput:
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise InputError(str(path), f"cannot read file: {e}") from e
        except json.JSONDecodeError as e:
            raise InputError(str(path), f"invalid JSON: {e}") from e
        return cls.from_dict(data, source=str(path))


class AnalysisResult(BaseModel):
    """Everything computed for one run; a plain serializable value."""

    nodes: list[FileNode] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    build: BuildStats = Field(default_factory=BuildStats)
    metrics: MetricsReport = Field(default_factory=MetricsReport)
    cycles: list[CycleGroup] = Field(default_factory=list)
    partition: Partition = Field(default_factory=Partition)
    scores: list[SignificanceScore] = Field(default_factory=list)
    selection: BudgetSelection = Field(default_factory=BudgetSelection)
    layers: dict[str, list[str]] = Field(default_factory=dict)
    directories: dict[str, list[str]] = Field(default_factory=dict)
    domains: dict[str, list[str]] = Field(default_factory=dict)
    languages: list[LanguageStat] = Field(default_factory=list)
    entry_points: list[str] = Field(default_factory=list)
    schema_files: list[str] = Field(default_factory=list)
    config_files: list[str] = Field(default_factory=list)
    high_value_files: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def ranked_paths(self) -> list[str]:
        return [s.path for s in self.scores]

    def score_of(self, path: str) -> SignificanceScore | None:
        for score in self.scores:
            if score.path == path:
                return score
        return None

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(indent=indent)
