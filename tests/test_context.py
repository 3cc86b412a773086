"""Tests for token-budgeted context selection and truncation."""

from __future__ import annotations

import pytest

from repograph.config import BudgetConfig
from repograph.context.budgeter import ContextBudgeter
from repograph.context.models import (
    BudgetCandidate,
    BudgetSelection,
    SelectionStatus,
    TokenEstimator,
)
from repograph.context.truncation import detect_language, marker_line, truncate_source

from conftest import USER_SERVICE_SOURCE

PYTHON_SOURCE = '''import os
from typing import Any


def load(path):
    with open(path) as f:
        return f.read()


class Store:
    def __init__(self):
        self.items = []

    def add(self, item):
        self.items.append(item)
'''


def count_lines(text: str) -> int:
    return len(text.splitlines())


def _candidates(*tokens: int) -> list[BudgetCandidate]:
    return [
        BudgetCandidate(path=f"f{i}.ts", rank=i, tokens=t)
        for i, t in enumerate(tokens, start=1)
    ]


class TestTokenEstimator:
    def test_estimate_basic(self):
        text = "def hello():\n    return 'world'"
        tokens = TokenEstimator.estimate(text)
        assert tokens > 0

    def test_estimate_empty(self):
        assert TokenEstimator.estimate("") == 1

    def test_estimate_proportional(self):
        short = TokenEstimator.estimate("x = 1")
        long = TokenEstimator.estimate("x = 1\n" * 100)
        assert long > short

    def test_estimate_bytes(self):
        assert TokenEstimator.estimate_bytes(800) == 200
        assert TokenEstimator.estimate_bytes(0) == 0


class TestContextBudgeter:
    def test_greedy_whole_files(self):
        selection = ContextBudgeter().select(_candidates(500, 500, 500), token_budget=700)

        assert [d.status for d in selection.decisions] == [
            SelectionStatus.WHOLE,
            SelectionStatus.EXCLUDED,
            SelectionStatus.EXCLUDED,
        ]
        assert selection.total_tokens == 500

    def test_skips_and_continues(self):
        selection = ContextBudgeter().select(_candidates(600, 300, 100), token_budget=700)

        assert [d.path for d in selection.included] == ["f1.ts", "f3.ts"]
        assert selection.total_tokens == 700

    def test_never_exceeds_budget(self):
        sizes = (120, 45, 900, 33, 250, 80, 10, 410, 5, 75)
        for budget in (0, 1, 50, 100, 333, 1000, 5000):
            selection = ContextBudgeter().select(_candidates(*sizes), token_budget=budget)
            assert selection.total_tokens <= max(budget, 0)
            assert selection.total_tokens == sum(d.selected_tokens for d in selection.decisions)
            assert len(selection.decisions) == len(sizes)

    def test_zero_budget_excludes_everything(self):
        selection = ContextBudgeter().select(_candidates(1, 2, 3), token_budget=0)

        assert selection.included == []
        assert selection.total_tokens == 0
        assert all(d.reason == "token budget is not positive" for d in selection.decisions)

    def test_negative_budget(self):
        selection = ContextBudgeter().select(_candidates(1), token_budget=-5)
        assert selection.token_budget == 0
        assert selection.excluded[0].path == "f1.ts"

    def test_uses_configured_budget(self):
        budgeter = ContextBudgeter(BudgetConfig(token_budget=100))
        selection = budgeter.select(_candidates(60, 60))
        assert selection.token_budget == 100
        assert len(selection.included) == 1

    def test_orders_by_rank(self):
        candidates = list(reversed(_candidates(1, 1, 1)))
        selection = ContextBudgeter().select(candidates, token_budget=10)
        assert [d.rank for d in selection.decisions] == [1, 2, 3]

    def test_truncates_when_skeleton_fits(self):
        candidates = [
            BudgetCandidate(path="a.ts", rank=1, tokens=10),
            BudgetCandidate(
                path="src/services/user.service.ts",
                rank=2,
                tokens=count_lines(USER_SERVICE_SOURCE),
                language="typescript",
                content=USER_SERVICE_SOURCE,
            ),
        ]
        budgeter = ContextBudgeter(token_counter=count_lines)
        selection = budgeter.select(candidates, token_budget=20)

        truncated = selection.decisions[1]
        assert truncated.status == SelectionStatus.TRUNCATED
        assert truncated.selected_tokens == 7
        assert truncated.tokens == 19
        assert "export class UserService {" in truncated.content
        assert "this.users.push(user);" not in truncated.content
        assert selection.total_tokens == 17

    def test_excludes_when_skeleton_too_large(self):
        candidates = [
            BudgetCandidate(path="a.ts", rank=1, tokens=10),
            BudgetCandidate(
                path="b.ts", rank=2, tokens=19, language="typescript", content=USER_SERVICE_SOURCE
            ),
        ]
        selection = ContextBudgeter(token_counter=count_lines).select(candidates, token_budget=15)

        assert selection.decisions[1].status == SelectionStatus.EXCLUDED
        assert selection.total_tokens == 10

    def test_truncation_disabled(self):
        candidates = [
            BudgetCandidate(
                path="b.ts", rank=1, tokens=19, language="typescript", content=USER_SERVICE_SOURCE
            ),
        ]
        budgeter = ContextBudgeter(BudgetConfig(allow_truncation=False), token_counter=count_lines)
        selection = budgeter.select(candidates, token_budget=10)

        assert selection.decisions[0].status == SelectionStatus.EXCLUDED

    def test_no_content_cannot_be_truncated(self):
        selection = ContextBudgeter().select(_candidates(50), token_budget=10)
        assert "no content" in selection.decisions[0].reason


class TestBudgetSelection:
    def test_render_marks_truncated(self):
        candidates = [
            BudgetCandidate(path="a.ts", rank=1, tokens=3, content="const a = 1;"),
            BudgetCandidate(
                path="b.ts", rank=2, tokens=19, language="typescript", content=USER_SERVICE_SOURCE
            ),
        ]
        selection = ContextBudgeter(token_counter=count_lines).select(candidates, token_budget=12)
        rendered = selection.render()

        assert "## a.ts\nconst a = 1;" in rendered
        assert "## b.ts (truncated)" in rendered

    def test_render_without_metadata(self):
        selection = ContextBudgeter().select(
            [BudgetCandidate(path="a.ts", rank=1, tokens=3, content="x")], token_budget=10
        )
        assert selection.render(include_metadata=False).startswith("## a.ts")

    def test_summary(self):
        selection = ContextBudgeter().select(_candidates(5, 50), token_budget=10)
        summary = selection.summary()

        assert summary.startswith("Tokens: 5 / 10 (50%)")
        assert "1 excluded" in summary
        assert "[excluded]" in summary

    def test_empty_selection(self):
        selection = BudgetSelection(token_budget=100)
        assert selection.included == []
        assert selection.budget_used_pct == 0.0


class TestTruncation:
    def test_python_skeleton(self):
        skeleton = truncate_source(PYTHON_SOURCE, "python")

        assert "import os" in skeleton
        assert "def load(path):" in skeleton
        assert "    def add(self, item):" in skeleton
        assert "return f.read()" not in skeleton
        assert "        # ... [truncated 1 line]" in skeleton

    def test_multiline_import_kept(self):
        source = "from x import (\n    a,\n    b,\n)\nvalue = compute()\n"
        skeleton = truncate_source(source, path="m.py")

        assert "    b," in skeleton
        assert "value = compute()" not in skeleton
        assert skeleton.endswith("# ... [truncated 1 line]")

    def test_typescript_skeleton(self):
        skeleton = truncate_source(USER_SERVICE_SOURCE, "typescript")

        assert skeleton.splitlines()[:2] == [
            'import { User } from "../models/user.schema";',
            'import { log } from "../utils/logger";',
        ]
        assert "  // ... [truncated 12 lines]" in skeleton
        assert "export function createUserService(): UserService {" in skeleton

    def test_bracket_in_string_default(self):
        source = 'def f(x="("):\n    return 1\n\n\ndef g():\n    y = 2\n'
        skeleton = truncate_source(source, "python")

        assert "return 1" not in skeleton
        assert "def g():" in skeleton
        assert skeleton.endswith("    # ... [truncated 1 line]")

    def test_bracket_in_template_literal(self):
        source = "import { a } from \"a\";\nexport function f(s = `{(`) {\n  return s;\n}\n"
        skeleton = truncate_source(source, "typescript")

        assert "return s;" not in skeleton

    def test_unchanged_when_nothing_to_omit(self):
        source = "import os\nimport sys\n"
        assert truncate_source(source, "python") == source

    @pytest.mark.parametrize(
        ("path", "language"),
        [("a.py", "python"), ("b.TSX", "typescript"), ("c.go", "go"), ("Makefile", "")],
    )
    def test_detect_language(self, path, language):
        assert detect_language(path) == language

    def test_marker_line(self):
        assert marker_line(1, "python") == "# ... [truncated 1 line]"
        assert marker_line(3, "go", "    ") == "    // ... [truncated 3 lines]"
