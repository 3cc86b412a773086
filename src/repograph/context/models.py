"""Data models for token-budgeted context selection."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SelectionStatus(str, Enum):
    """How a file ended up in (or out of) the selection."""

    WHOLE = "whole"
    TRUNCATED = "truncated"
    EXCLUDED = "excluded"


class BudgetCandidate(BaseModel):
    """A ranked file offered to the budgeter."""

    path: str
    rank: int
    score: float = 0.0
    tokens: int = Field(default=0, ge=0)
    language: str = ""
    content: str | None = None


class BudgetDecision(BaseModel):
    """The budgeter's verdict on one file."""

    model_config = ConfigDict(frozen=True)

    path: str
    rank: int
    score: float = 0.0
    status: SelectionStatus
    tokens: int = 0  # full-file token count
    selected_tokens: int = 0  # tokens charged against the budget
    content: str | None = None  # whole or truncated text, when known
    reason: str = ""


class BudgetSelection(BaseModel):
    """Every budget decision, in significance order, plus the running total."""

    model_config = ConfigDict(frozen=True)

    decisions: list[BudgetDecision] = Field(default_factory=list)
    token_budget: int = 0
    total_tokens: int = 0

    @property
    def included(self) -> list[BudgetDecision]:
        return [d for d in self.decisions if d.status != SelectionStatus.EXCLUDED]

    @property
    def truncated(self) -> list[BudgetDecision]:
        return [d for d in self.decisions if d.status == SelectionStatus.TRUNCATED]

    @property
    def excluded(self) -> list[BudgetDecision]:
        return [d for d in self.decisions if d.status == SelectionStatus.EXCLUDED]

    @property
    def budget_used_pct(self) -> float:
        return round(self.total_tokens / max(self.token_budget, 1) * 100, 1)

    def render(self, include_metadata: bool = True) -> str:
        """Concatenate the selected files for downstream consumption."""
        sections: list[str] = []

        if include_metadata:
            sections.append(
                f"# {len(self.included)} files "
                f"(~{self.total_tokens:,} tokens, {self.budget_used_pct:.0f}% of budget)"
            )
            sections.append("")

        for decision in self.included:
            header = f"## {decision.path}"
            if decision.status == SelectionStatus.TRUNCATED:
                header += " (truncated)"
            sections.append(header)
            sections.append(decision.content or "")
            sections.append("")

        return "\n".join(sections)

    def summary(self) -> str:
        """Human-readable summary of the selection."""
        lines = [
            f"Tokens: {self.total_tokens:,} / {self.token_budget:,} ({self.budget_used_pct:.0f}%)",
            f"Files: {len(self.included)} included "
            f"({len(self.truncated)} truncated), {len(self.excluded)} excluded",
            "",
        ]
        for d in self.decisions:
            lines.append(
                f"  #{d.rank} {d.path} [{d.status.value}] "
                f"{d.selected_tokens}/{d.tokens}tok score={d.score:.1f}"
            )
        return "\n".join(lines)


class TokenEstimator:
    """Estimate token counts for code."""

    # Rough heuristic: 1 token ≈ 4 characters for code
    CHARS_PER_TOKEN = 4.0

    @classmethod
    def estimate(cls, text: str) -> int:
        """Estimate token count for a string."""
        return max(1, int(len(text) / cls.CHARS_PER_TOKEN))

    @classmethod
    def estimate_bytes(cls, size: int) -> int:
        """Estimate tokens for a file of ``size`` bytes."""
        if size <= 0:
            return 0
        return max(1, int(size / cls.CHARS_PER_TOKEN))
