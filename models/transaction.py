from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

TRANSACTION_TYPES = ("income", "expense", "transfer")


@dataclass
class Transaction:
    id: Optional[int]
    account_id: int
    transaction_date: date
    description: str
    amount: Decimal  # always positive
    type: str  # 'income', 'expense', or 'transfer'
    category_id: Optional[int] = None
    transfer_to_account_id: Optional[int] = None  # receiving account of a transfer

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"

    def to_dict(self) -> dict:
        """Convert transaction to dictionary for database storage."""
        return {
            "id": self.id,
            "account_id": self.account_id,
            "category_id": self.category_id,
            "transaction_date": self.transaction_date.isoformat(),
            "description": self.description,
            "amount": str(self.amount),
            "transaction_type": self.type,
            "transfer_to_account_id": self.transfer_to_account_id,
        }
