"""Architectural layer and directory clustering."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePosixPath

from repograph.scoring.rules import LAYER_RULES, match_layer, name_tokens, tokenize

OTHER_LAYER = "other"
LAYERS: list[str] = [layer for layer, _ in LAYER_RULES] + [OTHER_LAYER]


def classify_layer(path: str) -> str:
    """Layer of a file, decided by its nearest recognised directory, then its name."""
    pure = PurePosixPath(path)
    for directory in reversed(pure.parent.parts):
        layer = match_layer(tokenize(directory))
        if layer is not None:
            return layer
    return match_layer(name_tokens(pure.name)) or OTHER_LAYER


def cluster_by_layer(paths: Iterable[str]) -> dict[str, list[str]]:
    """Group paths by layer; every layer key is present."""
    clusters: dict[str, list[str]] = {layer: [] for layer in LAYERS}
    for path in paths:
        clusters[classify_layer(path)].append(path)
    return {layer: sorted(members) for layer, members in clusters.items()}


def cluster_by_directory(paths: Iterable[str]) -> dict[str, list[str]]:
    """Group paths by parent directory (``.`` for the root)."""
    clusters: dict[str, list[str]] = {}
    for path in paths:
        parent = str(PurePosixPath(path).parent) or "."
        clusters.setdefault(parent, []).append(path)
    return {directory: sorted(clusters[directory]) for directory in sorted(clusters)}
