from dataclasses import dataclass

ACCOUNT_TYPES = ("checking", "savings", "credit", "cash", "investment")


@dataclass
class Account:
    id: int
    name: str  # unique, e.g., "main_checking"
    type: str  # one of ACCOUNT_TYPES
    description: str  # human readable, e.g., "Main Checking Account"

    @property
    def is_savings(self) -> bool:
        """Savings accounts hold goal money and cannot fund contributions."""
        return self.type == "savings"

    def to_dict(self) -> dict:
        """Convert account to dictionary for database storage."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "description": self.description,
        }
