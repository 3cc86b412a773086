#!/usr/bin/env python3
"""Demo: Using RepoGraph as a Python library.

This shows how to use RepoGraph programmatically, not just as a CLI tool.
"""

from repograph.analysis.engine import RepositoryAnalyzer
from repograph.config import ProjectConfig
from repograph.graph.models import ImportEdge, SourceFile


def main():
    # Files and resolved imports, as a scanner would report them
    files = [
        SourceFile(path="src/app.ts", function_count=1, size=900),
        SourceFile(path="src/routes/users.ts", function_count=3, size=1800),
        SourceFile(path="src/services/user.service.ts", class_count=1, size=2400),
        SourceFile(path="src/models/user.model.ts", interface_count=2, size=600),
        SourceFile(path="src/utils/logger.ts", function_count=2, size=500),
        SourceFile(path="src/utils/format.ts", function_count=4, size=700),
    ]
    edges = [
        ImportEdge(source="src/app.ts", target="src/routes/users.ts"),
        ImportEdge(source="src/app.ts", target="express"),
        ImportEdge(source="src/routes/users.ts", target="src/services/user.service.ts"),
        ImportEdge(source="src/services/user.service.ts", target="src/models/user.model.ts"),
        ImportEdge(source="src/services/user.service.ts", target="src/utils/logger.ts"),
        ImportEdge(source="src/utils/logger.ts", target="src/utils/format.ts"),
        ImportEdge(source="src/utils/format.ts", target="src/utils/logger.ts"),
    ]

    # 1. Run the pipeline
    print("Analyzing dependency graph...")
    config = ProjectConfig()
    analyzer = RepositoryAnalyzer(config)
    result = analyzer.analyze(files, edges, token_budget=1000)

    stats = result.build
    print(f"  Files: {stats.total_files}")
    print(f"  Edges retained: {stats.retained_edges}")
    print(f"  Unresolved imports: {stats.unresolved_imports}")

    # 2. Ranked files
    print("\n--- Most significant files ---")
    for score in result.scores[:5]:
        print(f"  #{score.rank} {score.path} ({score.total:.1f})")

    # 3. Circular imports
    print("\n--- Circular dependencies ---")
    for group in result.cycles:
        print(f"  cycle {group.id}: {' -> '.join(group.members)}")

    # 4. Domain clusters
    print(f"\n--- Communities (modularity {result.partition.modularity:.3f}) ---")
    for community in result.partition.communities:
        print(f"  {community.label}: {', '.join(community.members)}")

    # 5. Repository summary
    print("\n--- Summary ---")
    for stat in result.languages:
        print(f"  {stat.extension}: {stat.file_count} files")
    print(f"  Entry points: {', '.join(result.entry_points)}")
    print(f"  Schema files: {', '.join(result.schema_files)}")

    # 6. Budgeted context
    print("\n--- Context selection ---")
    print(result.selection.summary())


if __name__ == "__main__":
    main()
