"""Token-budgeted context selection.

Picks the most significant files that fit a token budget, truncating the
ones that only fit partially.

Usage:
    from repograph.context import ContextBudgeter

    selection = ContextBudgeter().select(candidates, token_budget=8000)
    print(selection.render())
"""

from repograph.context.budgeter import ContextBudgeter
from repograph.context.models import (
    BudgetCandidate,
    BudgetDecision,
    BudgetSelection,
    SelectionStatus,
    TokenEstimator,
)

__all__ = [
    "BudgetCandidate",
    "BudgetDecision",
    "BudgetSelection",
    "ContextBudgeter",
    "SelectionStatus",
    "TokenEstimator",
]
