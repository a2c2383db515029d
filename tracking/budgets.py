"""Budget utilization and alerting.

All functions here are pure: they read the budget records handed to them and
return derived values. Persisting spent amounts and alert flags is the job
of services.budgets.BudgetService.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence

from models.budget import Budget
from models.money import ZERO, to_decimal
from tracking.errors import InvalidAmount

HUNDRED = Decimal("100")

PAST = "past"
CURRENT = "current"
FUTURE = "future"

STATUS_OK = "ok"
STATUS_NEAR_LIMIT = "near_limit"
STATUS_OVER_BUDGET = "over_budget"

ALERT_NEAR = "near"
ALERT_OVER = "over"


@dataclass(frozen=True)
class BudgetEvaluation:
    """Presentation-ready utilization metrics for one budget.

    Attributes:
        spent_percentage: Utilization in [0, 100], capped at 100.
        is_over_budget: spent > allocated, on uncapped values.
        is_near_limit: spent_percentage >= alert threshold. Can be true
            together with is_over_budget.
        remaining: allocated - spent, negative when over budget.
    """

    spent_percentage: Decimal
    is_over_budget: bool
    is_near_limit: bool
    remaining: Decimal

    @property
    def status(self) -> str:
        """Single status for display; over-budget wins over near-limit."""
        if self.is_over_budget:
            return STATUS_OVER_BUDGET
        if self.is_near_limit:
            return STATUS_NEAR_LIMIT
        return STATUS_OK


@dataclass
class BudgetPartition:
    """Budgets split relative to a reference month."""

    past: List[Budget] = field(default_factory=list)
    current: List[Budget] = field(default_factory=list)
    future: List[Budget] = field(default_factory=list)


def spent_percentage(allocated_amount: Decimal, spent_amount: Decimal) -> Decimal:
    """Utilization percentage capped at 100.

    A zero allocation would divide by zero; the guard uses a denominator of 1
    on the fractional scale, so the spent amount itself is read as the
    percentage (50 spent against 0 allocated gives 50).
    """
    if allocated_amount > 0:
        percentage = spent_amount * HUNDRED / allocated_amount
    else:
        percentage = spent_amount
    return max(min(percentage, HUNDRED), ZERO)


def evaluate(budget: Budget) -> BudgetEvaluation:
    """Compute utilization metrics for a single budget.

    Args:
        budget: Budget record with allocated_amount, spent_amount and
            alert_threshold.

    Returns:
        BudgetEvaluation for the budget.

    Raises:
        InvalidAmount: If allocated_amount is negative.
    """
    allocated = to_decimal(budget.allocated_amount)
    spent = to_decimal(budget.spent_amount)

    if allocated < 0:
        raise InvalidAmount(f"Allocated amount cannot be negative: {allocated}")

    percentage = spent_percentage(allocated, spent)

    return BudgetEvaluation(
        spent_percentage=percentage,
        is_over_budget=spent > allocated,
        # Compared on the capped value, as displayed
        is_near_limit=percentage >= budget.alert_threshold,
        remaining=allocated - spent,
    )


def classify_period(
    year: int, month: int, current_year: int, current_month: int
) -> str:
    """Classify a budget period as past, current or future.

    Returns:
        One of PAST, CURRENT, FUTURE.

    Raises:
        ValueError: If either month is outside 1-12.
    """
    for value in (month, current_month):
        if not 1 <= value <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {value}")

    if (year, month) < (current_year, current_month):
        return PAST
    if (year, month) > (current_year, current_month):
        return FUTURE
    return CURRENT


def partition_budgets(
    budgets: Sequence[Budget], current_year: int, current_month: int
) -> BudgetPartition:
    """Split budgets into past, current and future groups.

    Past and current budgets keep their input order. Future budgets are
    sorted ascending by (year, month), nearest first.
    """
    partition = BudgetPartition()
    for budget in budgets:
        group = classify_period(budget.year, budget.month, current_year, current_month)
        getattr(partition, group).append(budget)

    partition.future.sort(key=lambda b: (b.year, b.month))
    return partition


def check_alerts(
    budget: Budget, evaluation: Optional[BudgetEvaluation] = None
) -> Optional[str]:
    """Return the alert level the budget has newly reached, if any.

    An alert level fires once per budget: the budget's alert_near_sent and
    alert_over_sent flags record what has already been raised. Over-budget
    is checked first so a jump straight past 100% raises only ALERT_OVER.

    Returns:
        ALERT_OVER, ALERT_NEAR or None.
    """
    evaluation = evaluation or evaluate(budget)

    reached_over = evaluation.is_over_budget or evaluation.spent_percentage >= HUNDRED
    if reached_over and not budget.alert_over_sent:
        return ALERT_OVER
    if reached_over:
        return None
    if evaluation.is_near_limit and not budget.alert_near_sent:
        return ALERT_NEAR
    return None
