"""Savings goal and contribution models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from models.money import ZERO, to_decimal

DEFAULT_GOAL_COLOR = "#3B82F6"

_RECORD_ALIASES = {
    "targetAmount": "target_amount",
    "currentAmount": "current_amount",
    "goalId": "goal_id",
    "accountId": "account_id",
    "createdAt": "created_at",
    "savingsAccountId": "savings_account_id",
    "transactionId": "transaction_id",
}


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass
class Goal:
    """Represents a savings goal.

    Attributes:
        id: Unique identifier (auto-generated).
        name: Display name.
        target_amount: Amount to save, positive.
        current_amount: Sum of accepted contributions.
        description: Optional free text.
        color: Display color.
        deadline: Optional target date.
        priority: LOW, MEDIUM or HIGH.
        completed: True exactly when current_amount >= target_amount. Only the
            goal tracker sets it.
        savings_account_id: Savings account that receives the contributions.
    """

    id: Optional[int]
    name: str
    target_amount: Decimal
    current_amount: Decimal = field(default=ZERO)
    description: Optional[str] = None
    color: Optional[str] = DEFAULT_GOAL_COLOR
    deadline: Optional[date] = None
    priority: Priority = Priority.MEDIUM
    completed: bool = False
    savings_account_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Goal":
        """Build a Goal from a record using either snake_case or camelCase keys."""
        values = {_RECORD_ALIASES.get(key, key): value for key, value in data.items()}
        deadline = values.get("deadline")
        if isinstance(deadline, str):
            deadline = date.fromisoformat(deadline)
        return cls(
            id=values.get("id"),
            name=values.get("name", ""),
            target_amount=to_decimal(values["target_amount"]),
            current_amount=to_decimal(values.get("current_amount", ZERO)),
            description=values.get("description"),
            color=values.get("color") or DEFAULT_GOAL_COLOR,
            deadline=deadline,
            priority=Priority(values.get("priority") or Priority.MEDIUM),
            completed=bool(values.get("completed", False)),
            savings_account_id=values.get("savings_account_id"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "target_amount": str(self.target_amount),
            "current_amount": str(self.current_amount),
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "priority": self.priority.value,
            "completed": self.completed,
            "savings_account_id": self.savings_account_id,
        }


@dataclass
class GoalContribution:
    """A positive amount moved from an account towards a goal."""

    goal_id: Optional[int]
    account_id: int
    amount: Decimal
    id: Optional[int] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    transaction_id: Optional[int] = None  # transfer that moved the money

    @classmethod
    def from_dict(cls, data: dict) -> "GoalContribution":
        values = {_RECORD_ALIASES.get(key, key): value for key, value in data.items()}
        return cls(
            goal_id=values.get("goal_id"),
            account_id=values["account_id"],
            amount=to_decimal(values["amount"]),
            id=values.get("id"),
            note=values.get("note"),
            transaction_id=values.get("transaction_id"),
        )
