"""Transaction service for database operations.

Every mutation of an expense transaction triggers a recomputation of the
spent amount of the budget covering its category and month, on the same
connection and before the single commit.
"""

import calendar
from datetime import date
from typing import List, Optional

from models.money import to_decimal
from models.transaction import TRANSACTION_TYPES, Transaction
from logger import get_logger

logger = get_logger("services.transactions")

_TRANSACTION_SELECT_FIELDS = """id, account_id, category_id, transaction_date,
       description, amount, transaction_type, transfer_to_account_id"""


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db_manager, budgets=None):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
            budgets: BudgetService used to refresh budget spent amounts.
        """
        self.db_manager = db_manager
        self.budgets = budgets

    def create(self, transaction: Transaction) -> Transaction:
        """Create a single transaction.

        Args:
            transaction: Transaction to insert; its id is ignored.

        Returns:
            The Transaction with its id populated.

        Raises:
            ValueError: If the type is unknown or the amount is not positive.
            sqlite3.IntegrityError: If the account or category doesn't exist.
        """
        with self.db_manager.connect() as conn:
            self.insert(conn, transaction)
            conn.commit()

        logger.debug(
            f"Created {transaction.type} transaction {transaction.id} "
            f"of {transaction.amount} on {transaction.transaction_date}"
        )
        return transaction

    def insert(self, conn, transaction: Transaction) -> Transaction:
        """Insert a transaction on the caller's connection without committing.

        The affected budget is refreshed in the same unit of work.

        Raises:
            ValueError: If the type is unknown or the amount is not positive.
            sqlite3.IntegrityError: If a referenced account or category doesn't exist.
        """
        self._validate(transaction)

        cursor = conn.execute(
            """
            INSERT INTO transactions (account_id, category_id, transaction_date, description,
                                      amount, transaction_type, transfer_to_account_id)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                transaction.account_id,
                transaction.category_id,
                transaction.transaction_date.isoformat(),
                transaction.description,
                str(transaction.amount),
                transaction.type,
                transaction.transfer_to_account_id,
            ),
        )
        transaction.id = cursor.lastrowid
        self._refresh_budget(conn, transaction)
        return transaction

    def update(self, transaction: Transaction) -> bool:
        """Update an existing transaction.

        Both the budget the transaction used to count against and the one it
        now counts against are refreshed.

        Returns:
            True if the transaction was updated, False if not found.
        """
        self._validate(transaction)

        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"SELECT {_TRANSACTION_SELECT_FIELDS} FROM transactions WHERE id = ?",
                (transaction.id,),
            ).fetchone()
            if not row:
                return False
            previous = self._row_to_transaction(row)

            conn.execute(
                """
                UPDATE transactions
                SET account_id = ?, category_id = ?, transaction_date = ?,
                    description = ?, amount = ?, transaction_type = ?,
                    transfer_to_account_id = ?
                WHERE id = ?
                """,
                (
                    transaction.account_id,
                    transaction.category_id,
                    transaction.transaction_date.isoformat(),
                    transaction.description,
                    str(transaction.amount),
                    transaction.type,
                    transaction.transfer_to_account_id,
                    transaction.id,
                ),
            )
            self._refresh_budget(conn, previous)
            self._refresh_budget(conn, transaction)
            conn.commit()
            return True

    def delete(self, transaction_id: int) -> bool:
        """Delete a transaction by ID.

        Returns:
            True if the transaction was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"SELECT {_TRANSACTION_SELECT_FIELDS} FROM transactions WHERE id = ?",
                (transaction_id,),
            ).fetchone()
            if not row:
                return False

            conn.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))
            self._refresh_budget(conn, self._row_to_transaction(row))
            conn.commit()

        logger.debug(f"Deleted transaction {transaction_id}")
        return True

    def find(self, transaction_id: int) -> Optional[Transaction]:
        """Get a single transaction by ID, or None if it doesn't exist."""
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"SELECT {_TRANSACTION_SELECT_FIELDS} FROM transactions WHERE id = ?",
                (transaction_id,),
            ).fetchone()
            return self._row_to_transaction(row) if row else None

    def find_by_account(self, account_id: int) -> List[Transaction]:
        """Get all transactions for an account, newest first."""
        with self.db_manager.connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {_TRANSACTION_SELECT_FIELDS}
                FROM transactions
                WHERE account_id = ?
                ORDER BY transaction_date DESC, id
                """,
                (account_id,),
            ).fetchall()
            return [self._row_to_transaction(row) for row in rows]

    def get_transactions_by_date_range(
        self,
        start_date: str,
        end_date: str,
        *,
        account_id: Optional[int] = None,
        category_ids: Optional[List[int]] = None,
        transaction_type: Optional[str] = None,
    ) -> List[Transaction]:
        """Get transactions within a date range.

        Args:
            start_date: Start date in ISO format (YYYY-MM-DD), inclusive.
            end_date: End date in ISO format (YYYY-MM-DD), inclusive.
            account_id: Optional account ID to filter by.
            category_ids: Optional list of category IDs to filter by.
            transaction_type: Optional 'income', 'expense' or 'transfer' filter.

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        query = f"""
            SELECT {_TRANSACTION_SELECT_FIELDS}
            FROM transactions
            WHERE transaction_date >= ? AND transaction_date <= ?
        """
        params = [start_date, end_date]

        if account_id is not None:
            query += " AND account_id = ?"
            params.append(account_id)

        if category_ids:
            placeholders = ", ".join(["?"] * len(category_ids))
            query += f" AND category_id IN ({placeholders})"
            params.extend(category_ids)

        if transaction_type is not None:
            query += " AND transaction_type = ?"
            params.append(transaction_type)

        query += " ORDER BY transaction_date DESC, id"

        with self.db_manager.connect() as conn:
            rows = conn.execute(query, params).fetchall()
            return [self._row_to_transaction(row) for row in rows]

    def get_transactions_by_month(
        self,
        year: int,
        month: int,
        *,
        account_id: Optional[int] = None,
        category_ids: Optional[List[int]] = None,
        transaction_type: Optional[str] = None,
    ) -> List[Transaction]:
        """Get transactions for a specific month (1-12), newest first."""
        last_day = calendar.monthrange(year, month)[1]

        return self.get_transactions_by_date_range(
            f"{year:04d}-{month:02d}-01",
            f"{year:04d}-{month:02d}-{last_day:02d}",
            account_id=account_id,
            category_ids=category_ids,
            transaction_type=transaction_type,
        )

    def _refresh_budget(self, conn, transaction: Transaction) -> None:
        """Recompute the budget covering the transaction's category and month."""
        if self.budgets is None or transaction.category_id is None:
            return
        self.budgets.refresh_spent(
            conn,
            transaction.category_id,
            transaction.transaction_date.year,
            transaction.transaction_date.month,
        )

    def _validate(self, transaction: Transaction) -> None:
        if transaction.type not in TRANSACTION_TYPES:
            raise ValueError(
                f"Invalid transaction type '{transaction.type}'. "
                f"Must be one of: {', '.join(TRANSACTION_TYPES)}"
            )
        if to_decimal(transaction.amount) <= 0:
            raise ValueError(
                f"Transaction amount must be positive, got {transaction.amount}"
            )

    def _row_to_transaction(self, row: tuple) -> Transaction:
        """Convert a database row to a Transaction object."""
        return Transaction(
            id=row[0],
            account_id=row[1],
            category_id=row[2],
            transaction_date=date.fromisoformat(row[3]),
            description=row[4],
            amount=to_decimal(row[5]),
            type=row[6],
            transfer_to_account_id=row[7],
        )
