"""Budget model: one month's allocation for one expense category."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

from models.money import ZERO, to_decimal

DEFAULT_ALERT_THRESHOLD = 80

# Keys used by the REST records of the web frontend
_RECORD_ALIASES = {
    "categoryId": "category_id",
    "allocatedAmount": "allocated_amount",
    "spentAmount": "spent_amount",
    "alertThreshold": "alert_threshold",
    "alertNearSent": "alert_near_sent",
    "alertOverSent": "alert_over_sent",
}


@dataclass
class Budget:
    """Represents a monthly budget for a category.

    Attributes:
        id: Unique identifier (auto-generated).
        category_id: ID of the expense category being budgeted.
        year: Budget period year.
        month: Budget period month, 1-12.
        allocated_amount: Amount allocated for the period.
        spent_amount: Sum of the period's expense transactions in the category.
            Maintained by BudgetService, never set by hand.
        alert_threshold: Utilization percentage (1-100) that counts as near-limit.
        alert_near_sent: Whether the near-limit alert already fired.
        alert_over_sent: Whether the over-budget alert already fired.
    """

    id: Optional[int]
    category_id: int
    year: int
    month: int
    allocated_amount: Decimal
    spent_amount: Decimal = field(default=ZERO)
    alert_threshold: int = DEFAULT_ALERT_THRESHOLD
    alert_near_sent: bool = False
    alert_over_sent: bool = False

    @property
    def period(self) -> Tuple[int, int]:
        """The (year, month) pair identifying the budget period."""
        return (self.year, self.month)

    @property
    def start_date(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end_date(self) -> date:
        """Last day of the budget month."""
        return self.start_date + relativedelta(day=31)

    @classmethod
    def from_dict(cls, data: dict) -> "Budget":
        """Build a Budget from a record using either snake_case or camelCase keys."""
        values = {_RECORD_ALIASES.get(key, key): value for key, value in data.items()}
        return cls(
            id=values.get("id"),
            category_id=values["category_id"],
            year=int(values["year"]),
            month=int(values["month"]),
            allocated_amount=to_decimal(values["allocated_amount"]),
            spent_amount=to_decimal(values.get("spent_amount", ZERO)),
            alert_threshold=int(
                values.get("alert_threshold") or DEFAULT_ALERT_THRESHOLD
            ),
            alert_near_sent=bool(values.get("alert_near_sent", False)),
            alert_over_sent=bool(values.get("alert_over_sent", False)),
        )

    def to_dict(self) -> dict:
        """Convert budget to dictionary for database storage."""
        return {
            "id": self.id,
            "category_id": self.category_id,
            "year": self.year,
            "month": self.month,
            "allocated_amount": str(self.allocated_amount),
            "spent_amount": str(self.spent_amount),
            "alert_threshold": self.alert_threshold,
            "alert_near_sent": self.alert_near_sent,
            "alert_over_sent": self.alert_over_sent,
        }
