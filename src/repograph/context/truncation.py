"""Skeleton extraction for files that only fit the budget partially.

A truncated file keeps its import/export statements, decorators and
declaration signatures. Every run of omitted lines is replaced by a single
marker comment such as ``# ... [truncated 12 lines]``.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

EXTENSION_LANGUAGE_MAP: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".kt": "kotlin",
    ".rb": "ruby",
    ".php": "php",
    ".cs": "csharp",
    ".swift": "swift",
}

_HASH_COMMENT_LANGUAGES = {"python", "ruby", "shell", "yaml", "toml"}

_PYTHON_KEEP = re.compile(
    r"^(?:import\s|from\s+\S+\s+import\s|@|class\s|def\s|async\s+def\s|__all__\s*=)"
)
_PYTHON_MEMBER = re.compile(r"^\s+(?:@|def\s|async\s+def\s|class\s)")
_PYTHON_IMPORT = re.compile(r"^(?:import\s|from\s)")

_CURLY_KEEP = re.compile(
    r"^(?:import\b|export\b|package\b|use\b|require\b|require_once\b|namespace\b|"
    r"@\w+|"
    r"(?:(?:public|private|protected|internal|abstract|final|static|sealed|"
    r"data|open|async|pub(?:\([^)]*\))?|unsafe|declare|default)\s+)*"
    r"(?:class|interface|enum|record|object|trait|struct|type|fn|func|function|"
    r"impl|def|module|const\s+\w+\s*=\s*require)\b)"
)
_CURLY_IMPORT = re.compile(r"^(?:import\b|export\s*\{|export\s+\*|use\b|package\b)")
_STRING_LITERAL = re.compile(r"""'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|`(?:\\.|[^`\\])*`""")


def detect_language(path: str) -> str:
    """Language tag for a path, or an empty string if unknown."""
    return EXTENSION_LANGUAGE_MAP.get(PurePosixPath(path).suffix.lower(), "")


def marker_line(omitted: int, language: str, indent: str = "") -> str:
    """The truncation marker for ``omitted`` dropped lines."""
    prefix = "#" if language in _HASH_COMMENT_LANGUAGES else "//"
    noun = "line" if omitted == 1 else "lines"
    return f"{indent}{prefix} ... [truncated {omitted} {noun}]"


def _is_kept(line: str, language: str) -> tuple[bool, bool]:
    """(keep, is_import) for one source line."""
    if language == "python":
        if _PYTHON_KEEP.match(line):
            return True, bool(_PYTHON_IMPORT.match(line))
        return bool(_PYTHON_MEMBER.match(line)), False
    if _CURLY_KEEP.match(line):
        return True, bool(_CURLY_IMPORT.match(line))
    return False, False


def _open_brackets(line: str, include_braces: bool) -> int:
    line = _STRING_LITERAL.sub("", line)  # brackets in string literals do not count
    depth = line.count("(") - line.count(")") + line.count("[") - line.count("]")
    if include_braces:
        depth += line.count("{") - line.count("}")
    return depth


def truncate_source(content: str, language: str = "", path: str = "") -> str:
    """Reduce source text to its import and declaration skeleton.

    Statements spanning several lines (parenthesised imports, long
    signatures) are kept until their brackets balance. Returns ``content``
    unchanged when nothing would be omitted.
    """
    language = language or detect_language(path)
    lines = content.splitlines()
    kept: list[str] = []
    omitted: list[str] = []
    markers = 0
    depth = 0
    continuing_import = False

    def flush() -> None:
        nonlocal markers
        if any(line.strip() for line in omitted):
            first = next(line for line in omitted if line.strip())
            indent = first[: len(first) - len(first.lstrip())]
            kept.append(marker_line(len(omitted), language, indent))
            markers += 1
        omitted.clear()

    for line in lines:
        if depth > 0:
            kept.append(line)
            depth = max(0, depth + _open_brackets(line, continuing_import))
            continue

        keep, is_import = _is_kept(line, language)
        if keep:
            flush()
            kept.append(line)
            continuing_import = is_import
            depth = max(0, _open_brackets(line, is_import))
        elif line.strip():
            omitted.append(line)
        elif omitted:
            omitted.append(line)
        else:
            kept.append(line)

    # Trailing blank lines alone do not need a marker
    while omitted and not omitted[-1].strip():
        omitted.pop()
    flush()

    if not markers:
        return content
    return "\n".join(kept)
