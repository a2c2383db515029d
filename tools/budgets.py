"""Budget overview tools."""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from models.budget import Budget
from tracking.budgets import BudgetEvaluation, evaluate, partition_budgets
from tracking.pagination import Page, paginate


def summarize_budget(budget: Budget, category_names: Dict[int, str]) -> Dict:
    """Pair a budget with its evaluation and category name."""
    return {
        "budget": budget,
        "category_name": category_names.get(budget.category_id, "Unknown"),
        "evaluation": evaluate(budget),
    }


def get_budget_overview(
    services,
    today: Optional[date] = None,
    *,
    current_page: int = 0,
    past_page: int = 0,
    future_page: int = 0,
    page_size: Optional[int] = None,
) -> Dict[str, Page]:
    """Get every budget evaluated and grouped relative to the current month.

    Args:
        services: Services container with budget and category services.
        today: Reference date, defaults to date.today().
        current_page: Zero-based page of the current month's budgets.
        past_page: Zero-based page of past budgets.
        future_page: Zero-based page of future budgets.
        page_size: Items per page, defaults to the configured page size.

    Returns:
        Dictionary with "current", "past" and "future" keys, each a Page of
        summaries as returned by summarize_budget():
        - "current": this month's budgets, largest allocation first
        - "past": earlier months, most recent first
        - "future": later months, nearest first
    """
    today = today or date.today()
    page_size = page_size or services.config.page_size

    category_names = {c.id: c.name for c in services.categories.find_all()}
    partition = partition_budgets(services.budgets.find_all(), today.year, today.month)

    current = sorted(partition.current, key=lambda b: b.allocated_amount, reverse=True)

    return {
        "current": paginate(
            [summarize_budget(b, category_names) for b in current],
            current_page,
            page_size,
        ),
        "past": paginate(
            [summarize_budget(b, category_names) for b in partition.past],
            past_page,
            page_size,
        ),
        "future": paginate(
            [summarize_budget(b, category_names) for b in partition.future],
            future_page,
            page_size,
        ),
    }


def get_period_totals(budgets: List[Budget]) -> Dict[str, Decimal]:
    """Total allocation, spending and remaining amount over a list of budgets.

    Returns:
        Dictionary with "allocated", "spent", "remaining" (Decimal) and
        "over_budget_count" (int).
    """
    allocated = sum((b.allocated_amount for b in budgets), Decimal("0"))
    spent = sum((b.spent_amount for b in budgets), Decimal("0"))
    evaluations: List[BudgetEvaluation] = [evaluate(b) for b in budgets]

    return {
        "allocated": allocated,
        "spent": spent,
        "remaining": allocated - spent,
        "over_budget_count": sum(1 for e in evaluations if e.is_over_budget),
    }


def compare_periods(
    services, year1: int, month1: int, year2: int, month2: int
) -> Dict[str, Dict]:
    """Compare the budgets of two months category by category.

    Returns:
        Dictionary with:
        - "periods": {"YYYY/MM": totals from get_period_totals()} for both months
        - "categories": {category_id: {"YYYY/MM": Budget or None, ...}}
    """
    key1 = f"{year1:04d}/{month1:02d}"
    key2 = f"{year2:04d}/{month2:02d}"

    first = services.budgets.find_by_period(year1, month1)
    second = services.budgets.find_by_period(year2, month2)

    categories: Dict[int, Dict[str, Optional[Budget]]] = {}
    for key, budgets in ((key1, first), (key2, second)):
        for budget in budgets:
            categories.setdefault(budget.category_id, {key1: None, key2: None})
            categories[budget.category_id][key] = budget

    return {
        "periods": {
            key1: get_period_totals(first),
            key2: get_period_totals(second),
        },
        "categories": categories,
    }
