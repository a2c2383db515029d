"""Category model for transaction categorization and budgeting."""

from dataclasses import dataclass
from typing import Optional

CATEGORY_TYPES = ("income", "expense")


@dataclass
class Category:
    """Represents a user-defined transaction category.

    Attributes:
        id: Unique identifier (auto-generated).
        name: Category name (unique).
        type: "income" or "expense". Only expense categories can be budgeted.
        description: Optional description of what belongs in this category.
        color: Optional display color, e.g. "#3B82F6".
    """

    id: int
    name: str
    type: str = "expense"
    description: Optional[str] = None
    color: Optional[str] = None

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "color": self.color,
        }
