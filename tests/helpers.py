"""Helper utilities for tests."""

from datetime import date
from decimal import Decimal

from models.budget import Budget
from models.goal import Goal
from models.transaction import Transaction


def make_budget(allocated, spent, alert_threshold=80, year=2025, month=6, **kwargs) -> Budget:
    """Build an in-memory Budget with Decimal amounts."""
    return Budget(
        id=kwargs.pop("id", None),
        category_id=kwargs.pop("category_id", 1),
        year=year,
        month=month,
        allocated_amount=Decimal(str(allocated)),
        spent_amount=Decimal(str(spent)),
        alert_threshold=alert_threshold,
        **kwargs,
    )


def make_goal(target, current=0, **kwargs) -> Goal:
    """Build an in-memory Goal with Decimal amounts."""
    return Goal(
        id=kwargs.pop("id", 1),
        name=kwargs.pop("name", "Emergency fund"),
        target_amount=Decimal(str(target)),
        current_amount=Decimal(str(current)),
        **kwargs,
    )


def add_expense(services, account, category, amount, on: date, description="Expense"):
    """Record an expense transaction through the service."""
    return services.transactions.create(
        Transaction(
            id=None,
            account_id=account.id,
            category_id=category.id if category else None,
            transaction_date=on,
            description=description,
            amount=Decimal(str(amount)),
            type="expense",
        )
    )
