"""Greedy token-budgeted context selection.

Files are visited from most to least significant. A file that fits is
included whole. One that does not is offered in truncated form (imports
and signatures only, see :mod:`repograph.context.truncation`) if that form
fits what is left; otherwise it is excluded and the walk moves on. Earlier
decisions are never revisited, and the running total never exceeds the
budget.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from repograph.config import BudgetConfig
from repograph.context.models import (
    BudgetCandidate,
    BudgetDecision,
    BudgetSelection,
    SelectionStatus,
    TokenEstimator,
)
from repograph.context.truncation import truncate_source

logger = logging.getLogger("repograph.context")


class ContextBudgeter:
    """Selects a token-bounded subset of ranked files.

    Usage:
        budgeter = ContextBudgeter(BudgetConfig(token_budget=8000))
        selection = budgeter.select(candidates)
        llm_context = selection.render()
    """

    def __init__(
        self,
        config: BudgetConfig | None = None,
        token_counter: Callable[[str], int] | None = None,
    ) -> None:
        self.config = config or BudgetConfig()
        self.token_counter = token_counter or TokenEstimator.estimate

    def select(
        self,
        candidates: Sequence[BudgetCandidate],
        token_budget: int | None = None,
    ) -> BudgetSelection:
        """Run the greedy selection.

        Args:
            candidates: Ranked files with precomputed token counts.
            token_budget: Overrides the configured budget.

        Returns:
            A decision for every candidate, in rank order.
        """
        budget = self.config.token_budget if token_budget is None else token_budget
        ordered = sorted(candidates, key=lambda c: (c.rank, c.path))

        if budget <= 0:
            decisions = [
                self._excluded(c, "token budget is not positive") for c in ordered
            ]
            return BudgetSelection(decisions=decisions, token_budget=max(budget, 0))

        decisions: list[BudgetDecision] = []
        used = 0

        for cand in ordered:
            remaining = budget - used

            if cand.tokens <= remaining:
                decisions.append(
                    BudgetDecision(
                        path=cand.path,
                        rank=cand.rank,
                        score=cand.score,
                        status=SelectionStatus.WHOLE,
                        tokens=cand.tokens,
                        selected_tokens=cand.tokens,
                        content=cand.content,
                        reason="fits remaining budget",
                    )
                )
                used += cand.tokens
                continue

            decision = self._try_truncate(cand, remaining)
            decisions.append(decision)
            used += decision.selected_tokens

        logger.debug(
            "Selected %d of %d files, %d/%d tokens",
            sum(1 for d in decisions if d.status != SelectionStatus.EXCLUDED),
            len(decisions), used, budget,
        )
        return BudgetSelection(decisions=decisions, token_budget=budget, total_tokens=used)

    def _try_truncate(self, cand: BudgetCandidate, remaining: int) -> BudgetDecision:
        if not self.config.allow_truncation:
            return self._excluded(cand, "exceeds remaining budget")
        if not cand.content:
            return self._excluded(cand, "exceeds remaining budget; no content to truncate")

        skeleton = truncate_source(cand.content, cand.language, cand.path)
        if skeleton == cand.content:
            return self._excluded(cand, "exceeds remaining budget; nothing to truncate")

        skeleton_tokens = self.token_counter(skeleton)
        if skeleton_tokens >= cand.tokens or skeleton_tokens > remaining:
            return self._excluded(cand, "truncated form exceeds remaining budget")

        return BudgetDecision(
            path=cand.path,
            rank=cand.rank,
            score=cand.score,
            status=SelectionStatus.TRUNCATED,
            tokens=cand.tokens,
            selected_tokens=skeleton_tokens,
            content=skeleton,
            reason="truncated to imports and signatures",
        )

    @staticmethod
    def _excluded(cand: BudgetCandidate, reason: str) -> BudgetDecision:
        return BudgetDecision(
            path=cand.path,
            rank=cand.rank,
            score=cand.score,
            status=SelectionStatus.EXCLUDED,
            tokens=cand.tokens,
            reason=reason,
        )
