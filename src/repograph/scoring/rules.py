"""Ordered pattern-rule tables for significance and layer classification.

Rules are plain data evaluated by :func:`match_rules`; no call site does
its own keyword matching. Matching works on lowercase word tokens, so
``userController.ts`` yields ``["user", "controller"]`` and
``__tests__`` yields ``["tests"]``. Singular and plural forms of a
keyword match each other (``model``/``models``, ``entity``/``entities``).
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from pydantic import BaseModel, Field


class PatternRule(BaseModel):
    """A keyword category and the score it contributes when matched."""

    category: str
    keywords: list[str] = Field(default_factory=list)
    score: float = 0.0


# File-name categories. Highest matching score wins.
DEFAULT_NAME_RULES: list[PatternRule] = [
    PatternRule(category="schema", keywords=["schema", "model", "entity"], score=30),
    PatternRule(category="service", keywords=["service", "controller", "handler"], score=28),
    PatternRule(category="api", keywords=["api", "route", "endpoint"], score=25),
    PatternRule(category="state", keywords=["store", "reducer", "action"], score=22),
    PatternRule(category="types", keywords=["types", "interface", "dto"], score=20),
    PatternRule(category="entry", keywords=["main", "app", "server"], score=18),
    PatternRule(category="index", keywords=["index"], score=15),
    PatternRule(category="config", keywords=["config", "settings"], score=12),
    PatternRule(category="util", keywords=["util", "helper", "constant"], score=10),
    PatternRule(category="test", keywords=["test", "spec", "mock"], score=5),
]

# Directory categories. The directory nearest the file decides.
DEFAULT_PATH_RULES: list[PatternRule] = [
    PatternRule(category="data", keywords=["models", "entities", "schemas"], score=25),
    PatternRule(category="core", keywords=["services", "core", "domain"], score=23),
    PatternRule(category="api", keywords=["api", "routes", "controllers"], score=20),
    PatternRule(category="ui", keywords=["components"], score=18),
    PatternRule(category="lib", keywords=["lib", "packages"], score=15),
    PatternRule(category="util", keywords=["utils", "helpers"], score=8),
    PatternRule(category="test", keywords=["test", "tests", "spec", "fixtures"], score=5),
]

# Architectural layers, first match wins.
LAYER_RULES: list[tuple[str, list[str]]] = [
    ("presentation", [
        "components", "pages", "views", "ui", "screens", "layouts",
        "templates", "widgets", "api", "routes", "cli",
    ]),
    ("business", [
        "services", "controllers", "handlers", "domain", "usecases", "core",
        "workflows",
    ]),
    ("data", [
        "models", "entities", "schemas", "repositories", "db", "database",
        "migrations", "store", "dao",
    ]),
    ("infrastructure", [
        "utils", "helpers", "lib", "config", "middleware", "infra",
        "adapters", "shared", "common",
    ]),
]

_SPLIT_RE = re.compile(r"[^A-Za-z0-9]+")
_WORD_RE = re.compile(r"[A-Z]?[a-z]+|[A-Z]+(?![a-z])|\d+")


def tokenize(text: str) -> list[str]:
    """Split a file or directory name into lowercase word tokens."""
    tokens: list[str] = []
    for chunk in _SPLIT_RE.split(text):
        if not chunk:
            continue
        tokens.extend(word.lower() for word in _WORD_RE.findall(chunk))
    return tokens


def name_tokens(file_name: str) -> list[str]:
    """Tokens of a file name with its final extension removed."""
    stem, dot, _ext = file_name.rpartition(".")
    if not dot or not stem:
        stem = file_name
    return tokenize(stem)


def _forms(word: str) -> set[str]:
    forms = {word, word + "s", word + "es"}
    if word.endswith("y"):
        forms.add(word[:-1] + "ies")
    return forms


def keyword_matches(token: str, keyword: str) -> bool:
    """True if ``token`` is ``keyword`` or its singular/plural counterpart."""
    return token in _forms(keyword) or keyword in _forms(token)


def match_rules(tokens: Iterable[str], rules: Sequence[PatternRule]) -> PatternRule | None:
    """Return the highest-scoring rule matching any token.

    Ties go to the rule listed first.
    """
    token_list = list(tokens)
    best: PatternRule | None = None
    for rule in rules:
        if best is not None and rule.score <= best.score:
            continue
        if any(keyword_matches(t, kw) for t in token_list for kw in rule.keywords):
            best = rule
    return best


def match_layer(tokens: Iterable[str]) -> str | None:
    """Return the first layer whose keywords match any token."""
    token_list = list(tokens)
    for layer, keywords in LAYER_RULES:
        if any(keyword_matches(t, kw) for t in token_list for kw in keywords):
            return layer
    return None
