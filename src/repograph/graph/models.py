"""Data models for the file-level dependency graph."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field


class EdgeKind(str, Enum):
    """Types of file-to-file relationships."""

    IMPORT = "import"


class SourceFile(BaseModel):
    """A discovered file, as supplied by the file walker and content scanner.

    Structural counts come from an upstream parser. ``token_count`` and
    ``content`` are optional; without them token cost is estimated from
    ``size``.
    """

    path: str
    size: int = 0
    language: str = ""
    class_count: int = 0
    interface_count: int = 0
    function_count: int = 0
    import_count: int = 0
    token_count: int | None = None
    content: str | None = None


class ImportEdge(BaseModel):
    """A resolved import from ``source`` to ``target``.

    ``target`` is None for an import the upstream parser could not resolve.
    """

    source: str
    target: str | None = None
    weight: int = Field(default=1, ge=1)

    @property
    def resolved(self) -> bool:
        return self.target is not None


class FileNode(BaseModel):
    """A file in the built graph."""

    model_config = ConfigDict(frozen=True)

    path: str
    size: int = 0
    language: str = ""
    class_count: int = 0
    interface_count: int = 0
    function_count: int = 0
    import_count: int = 0

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name

    @property
    def directory(self) -> str:
        parent = str(PurePosixPath(self.path).parent)
        return parent or "."


class Edge(BaseModel):
    """A directed import edge between two known files."""

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    kind: EdgeKind = EdgeKind.IMPORT
    weight: int = 1


class BuildStats(BaseModel):
    """Diagnostics from graph construction.

    ``dropped_edges`` counts every supplied edge that did not become part
    of the graph and includes ``unresolved_imports``, so
    ``retained_edges + dropped_edges == total_edges``.
    """

    model_config = ConfigDict(frozen=True)

    total_files: int = 0
    total_edges: int = 0
    retained_edges: int = 0
    dropped_edges: int = 0
    unknown_source_edges: int = 0
    unresolved_imports: int = 0
    duplicate_files: int = 0
    unique_edges: int = 0
    self_loops: int = 0
