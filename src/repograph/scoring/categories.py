"""Repository summary: language breakdown, file categories and domains.

Entry points, schema files and config files are recognised by file name.
Schema and config detection reuse the name rule table, so a custom
``schema`` or ``config`` rule in the project configuration changes what
is reported here too.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict

from repograph.context.truncation import detect_language
from repograph.graph.models import FileNode
from repograph.scoring.rules import PatternRule, match_layer, match_rules, name_tokens, tokenize

ENTRY_POINT_STEMS = {"index", "main", "app", "server", "cli", "__main__", "manage", "wsgi", "asgi"}

CONFIG_FILE_NAMES = {
    "package.json",
    "tsconfig.json",
    "jsconfig.json",
    "pyproject.toml",
    "setup.cfg",
    "setup.py",
    "requirements.txt",
    "pipfile",
    "cargo.toml",
    "go.mod",
    "pom.xml",
    "build.gradle",
    "makefile",
    "dockerfile",
    "docker-compose.yml",
    "docker-compose.yaml",
}

# Directories that hold code without naming a business domain
GENERIC_DIRECTORIES = {
    "src", "source", "app", "apps", "lib", "libs", "packages", "pkg", "internal",
    "modules", "features", "test", "tests", "__tests__", "spec", "specs", "e2e",
    "fixtures", "scripts", "bin", "dist", "build", "docs", "examples", "public",
    "assets", "static",
}

NO_EXTENSION = "(none)"


class LanguageStat(BaseModel):
    """Number of files sharing one extension."""

    model_config = ConfigDict(frozen=True)

    extension: str
    language: str = ""
    file_count: int = 0


def language_breakdown(nodes: Iterable[FileNode]) -> list[LanguageStat]:
    """File counts per extension, most common first."""
    counts: Counter[str] = Counter()
    languages: dict[str, str] = {}
    for node in nodes:
        ext = PurePosixPath(node.path).suffix.lower() or NO_EXTENSION
        counts[ext] += 1
        if not languages.get(ext):
            languages[ext] = node.language or detect_language(node.path)

    return [
        LanguageStat(extension=ext, language=languages[ext], file_count=count)
        for ext, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]


def _stem(path: str) -> str:
    return PurePosixPath(path).name.split(".", 1)[0].lower()


def is_entry_point(path: str) -> bool:
    return _stem(path) in ENTRY_POINT_STEMS


def _has_category(path: str, rules: Sequence[PatternRule], category: str) -> bool:
    rule = match_rules(name_tokens(PurePosixPath(path).name), rules)
    return rule is not None and rule.category == category


def is_schema_file(path: str, rules: Sequence[PatternRule]) -> bool:
    return _has_category(path, rules, "schema")


def is_config_file(path: str, rules: Sequence[PatternRule]) -> bool:
    name = PurePosixPath(path).name.lower()
    if name in CONFIG_FILE_NAMES:
        return True
    # Dotfile tool configs: .eslintrc.js, .prettierrc, .babelrc.json
    if name.startswith(".") and "rc" in name.split(".")[1]:
        return True
    return ".config." in name or _has_category(path, rules, "config")


def domain_of(path: str) -> str | None:
    """The first directory that is neither a generic container nor a layer."""
    for directory in PurePosixPath(path).parent.parts:
        if directory.lower() in GENERIC_DIRECTORIES:
            continue
        if match_layer(tokenize(directory)) is not None:
            continue
        return directory
    return None


def cluster_by_domain(paths: Iterable[str]) -> dict[str, list[str]]:
    """Group paths by inferred domain directory; files without one are left out."""
    clusters: dict[str, list[str]] = {}
    for path in paths:
        domain = domain_of(path)
        if domain is not None:
            clusters.setdefault(domain, []).append(path)
    return {domain: sorted(clusters[domain]) for domain in sorted(clusters)}
