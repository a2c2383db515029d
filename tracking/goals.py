"""Goal progress tracking.

A goal is ACTIVE until its saved amount reaches the target, then COMPLETED.
``completed`` is never set on its own: every function that changes
``current_amount`` recomputes it from the amounts.
"""

from dataclasses import dataclass
from decimal import Decimal

from models.goal import Goal, GoalContribution
from models.money import to_decimal
from tracking.errors import InvalidAmount

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class GoalProgress:
    progress_percentage: Decimal  # uncapped, may exceed 100
    completed: bool


def is_completed(current_amount: Decimal, target_amount: Decimal) -> bool:
    return current_amount >= target_amount


def progress(goal: Goal) -> GoalProgress:
    """Compute progress percentage and completion for a goal.

    Raises:
        InvalidAmount: If the goal's target amount is not positive.
    """
    target = to_decimal(goal.target_amount)
    current = to_decimal(goal.current_amount)

    if target <= 0:
        raise InvalidAmount(f"Target amount must be positive: {target}")

    return GoalProgress(
        progress_percentage=current * HUNDRED / target,
        completed=is_completed(current, target),
    )


def recompute_completed(goal: Goal) -> Goal:
    """Bring goal.completed back in line with its amounts.

    Used after current_amount or target_amount changed. Raising the target
    above the saved amount moves a completed goal back to active.
    """
    goal.completed = is_completed(
        to_decimal(goal.current_amount), to_decimal(goal.target_amount)
    )
    return goal


def validate_contribution(contribution: GoalContribution) -> Decimal:
    """Check a contribution before it is accepted.

    Only the amount is checked here; the source account is validated by
    the services layer.

    Returns:
        The contribution amount as a Decimal.

    Raises:
        InvalidAmount: If the amount is zero or negative.
    """
    amount = to_decimal(contribution.amount)
    if amount <= 0:
        raise InvalidAmount(f"Contribution amount must be positive: {amount}")
    return amount


def add_contribution(goal: Goal, contribution: GoalContribution) -> Goal:
    """Apply a contribution to a goal.

    The goal is updated in place and returned. On failure the goal is left
    untouched.

    Raises:
        InvalidAmount: If the contribution amount is not positive.
    """
    amount = validate_contribution(contribution)

    goal.current_amount = to_decimal(goal.current_amount) + amount
    return recompute_completed(goal)
