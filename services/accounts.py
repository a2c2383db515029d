"""Account service for database operations."""

from typing import List, Optional
from models.account import ACCOUNT_TYPES, Account
from logger import get_logger

logger = get_logger("services.accounts")

_ACCOUNT_SELECT = "SELECT id, name, type, description FROM accounts"


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db_manager):
        """Initialize the account service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Account]:
        """Get all accounts, ordered by id."""
        with self.db_manager.connect() as conn:
            rows = conn.execute(f"{_ACCOUNT_SELECT} ORDER BY id").fetchall()
            return [self._row_to_account(row) for row in rows]

    def find_funding_accounts(self) -> List[Account]:
        """Get the accounts that may fund a goal contribution.

        Returns:
            All non-savings accounts, ordered by id.
        """
        with self.db_manager.connect() as conn:
            rows = conn.execute(
                f"{_ACCOUNT_SELECT} WHERE type != 'savings' ORDER BY id"
            ).fetchall()
            return [self._row_to_account(row) for row in rows]

    def find(self, account_id: int) -> Optional[Account]:
        """Get a single account by ID.

        Args:
            account_id: The account ID to find.

        Returns:
            Account object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"{_ACCOUNT_SELECT} WHERE id = ?", (account_id,)
            ).fetchone()
            return self._row_to_account(row) if row else None

    def find_by_name(self, name: str) -> Optional[Account]:
        """Get a single account by its (case-sensitive) name."""
        with self.db_manager.connect() as conn:
            row = conn.execute(f"{_ACCOUNT_SELECT} WHERE name = ?", (name,)).fetchone()
            return self._row_to_account(row) if row else None

    def create(self, name: str, account_type: str, description: str = "") -> Account:
        """Create a new account.

        Args:
            name: Account name (should be unique).
            account_type: One of checking, savings, credit, cash, investment.
            description: Human-readable description.

        Returns:
            The created Account object with id populated.

        Raises:
            ValueError: If the account type is unknown.
            sqlite3.IntegrityError: If the name is already taken.
        """
        if account_type not in ACCOUNT_TYPES:
            raise ValueError(
                f"Invalid account type '{account_type}'. "
                f"Must be one of: {', '.join(ACCOUNT_TYPES)}"
            )

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO accounts (name, type, description) VALUES (?, ?, ?)",
                (name, account_type, description),
            )
            conn.commit()

        logger.info(f"Created {account_type} account '{name}' (ID: {cursor.lastrowid})")
        return Account(
            id=cursor.lastrowid, name=name, type=account_type, description=description
        )

    def delete(self, account_id: int) -> bool:
        """Delete an account by ID.

        Returns:
            True if account was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM accounts WHERE id = ?", (account_id,))
            conn.commit()
            return cursor.rowcount > 0

    def _row_to_account(self, row: tuple) -> Account:
        return Account(id=row[0], name=row[1], type=row[2], description=row[3])
