"""Derived budget and goal state computed from raw records."""

from tracking.errors import InvalidAmount
from tracking.budgets import (
    BudgetEvaluation,
    check_alerts,
    classify_period,
    evaluate,
    partition_budgets,
)
from tracking.goals import GoalProgress, add_contribution, progress, recompute_completed
from tracking.pagination import Page, paginate

__all__ = [
    "InvalidAmount",
    "BudgetEvaluation",
    "check_alerts",
    "classify_period",
    "evaluate",
    "partition_budgets",
    "GoalProgress",
    "add_contribution",
    "progress",
    "recompute_completed",
    "Page",
    "paginate",
]
