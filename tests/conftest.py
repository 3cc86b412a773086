"""Shared test fixtures for RepoGraph."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from repograph.graph.builder import GraphBuilder
from repograph.graph.models import ImportEdge, SourceFile

USER_SERVICE_SOURCE = '''import { User } from "../models/user.schema";
import { log } from "../utils/logger";

export class UserService {
  private users: User[] = [];

  find(id: string): User | undefined {
    log(`find ${id}`);
    return this.users.find((u) => u.id === id);
  }

  add(user: User): void {
    this.users.push(user);
  }
}

export function createUserService(): UserService {
  return new UserService();
}
'''

USER_SCHEMA_SOURCE = '''export interface User {
  id: string;
  email: string;
}
'''


@pytest.fixture
def sample_files() -> list[SourceFile]:
    """A small TypeScript service with a logger/formatter import cycle."""
    return [
        SourceFile(path="src/index.ts", language="typescript", function_count=1, token_count=40),
        SourceFile(path="src/app.ts", language="typescript", function_count=1, token_count=120),
        SourceFile(path="src/api/routes.ts", language="typescript", function_count=3, token_count=300),
        SourceFile(
            path="src/services/user.service.ts",
            language="typescript",
            class_count=1,
            function_count=1,
            content=USER_SERVICE_SOURCE,
        ),
        SourceFile(
            path="src/services/order.service.ts",
            language="typescript",
            class_count=1,
            function_count=2,
            token_count=450,
        ),
        SourceFile(
            path="src/models/order.model.ts",
            language="typescript",
            class_count=1,
            interface_count=2,
            token_count=200,
        ),
        SourceFile(
            path="src/models/user.schema.ts",
            language="typescript",
            interface_count=1,
            content=USER_SCHEMA_SOURCE,
        ),
        SourceFile(path="src/utils/logger.ts", language="typescript", function_count=2, size=640),
        SourceFile(path="src/utils/format.util.ts", language="typescript", function_count=4, size=400),
        SourceFile(path="tests/user.test.ts", language="typescript", token_count=150),
    ]


@pytest.fixture
def sample_edges() -> list[ImportEdge]:
    pairs = [
        ("src/index.ts", "src/app.ts"),
        ("src/app.ts", "src/api/routes.ts"),
        ("src/app.ts", "src/utils/logger.ts"),
        ("src/app.ts", None),  # "express", not part of the file set
        ("src/api/routes.ts", "src/services/user.service.ts"),
        ("src/api/routes.ts", "src/services/order.service.ts"),
        ("src/services/user.service.ts", "src/models/user.schema.ts"),
        ("src/services/user.service.ts", "src/utils/logger.ts"),
        ("src/services/order.service.ts", "src/models/order.model.ts"),
        ("src/services/order.service.ts", "src/services/user.service.ts"),
        ("src/services/order.service.ts", "src/utils/logger.ts"),
        ("src/models/order.model.ts", "src/models/user.schema.ts"),
        ("src/utils/logger.ts", "src/utils/format.util.ts"),
        ("src/utils/format.util.ts", "src/utils/logger.ts"),
        ("tests/user.test.ts", "src/services/user.service.ts"),
        ("dist/bundle.js", "src/index.ts"),  # source filtered out upstream
    ]
    return [ImportEdge(source=s, target=t) for s, t in pairs]


@pytest.fixture
def sample_graph(sample_files, sample_edges):
    return GraphBuilder().build(sample_files, sample_edges)


@pytest.fixture
def input_file(tmp_path: Path, sample_files, sample_edges) -> Path:
    """The sample project written as an analysis input document."""
    path = tmp_path / "input.json"
    path.write_text(
        json.dumps(
            {
                "files": [f.model_dump(exclude_none=True) for f in sample_files],
                "edges": [e.model_dump() for e in sample_edges],
            }
        )
    )
    return path

