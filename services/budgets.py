"""Budget service for database operations.

Owns the persisted spent_amount of every budget: it is recomputed from the
expense transactions of the budget's category and month whenever a budget
is created or a related transaction changes, never adjusted incrementally.
"""

from decimal import Decimal
from typing import List, Optional

from models.budget import DEFAULT_ALERT_THRESHOLD, Budget
from models.money import ZERO, to_decimal
from tracking.budgets import ALERT_NEAR, ALERT_OVER, check_alerts, evaluate
from tracking.errors import InvalidAmount
from logger import get_logger

logger = get_logger("services.budgets")

_BUDGET_SELECT = """SELECT id, category_id, year, month, allocated_amount, spent_amount,
       alert_threshold, alert_near_sent, alert_over_sent
FROM budgets"""


class BudgetService:
    """Service for managing monthly category budgets."""

    def __init__(self, db_manager, default_alert_threshold: int = DEFAULT_ALERT_THRESHOLD):
        """Initialize the budget service.

        Args:
            db_manager: Database manager instance for database operations.
            default_alert_threshold: Threshold used when none is given on create.
        """
        self.db_manager = db_manager
        self.default_alert_threshold = default_alert_threshold

    def find_all(self) -> List[Budget]:
        """Get all budgets, most recent period first."""
        with self.db_manager.connect() as conn:
            rows = conn.execute(
                f"{_BUDGET_SELECT} ORDER BY year DESC, month DESC, id"
            ).fetchall()
            return [self._row_to_budget(row) for row in rows]

    def find_by_period(self, year: int, month: int) -> List[Budget]:
        """Get the budgets of one month, largest allocation first."""
        with self.db_manager.connect() as conn:
            rows = conn.execute(
                f"{_BUDGET_SELECT} WHERE year = ? AND month = ? ORDER BY id",
                (year, month),
            ).fetchall()
        budgets = [self._row_to_budget(row) for row in rows]
        # Amounts are TEXT in the database, so order numerically here
        return sorted(budgets, key=lambda b: b.allocated_amount, reverse=True)

    def find(self, budget_id: int) -> Optional[Budget]:
        """Get a single budget by ID, or None if it doesn't exist."""
        with self.db_manager.connect() as conn:
            return self._find(conn, budget_id)

    def find_by_category_and_period(
        self, category_id: int, year: int, month: int
    ) -> Optional[Budget]:
        """Get the budget of a category for one month, or None."""
        with self.db_manager.connect() as conn:
            return self._find_by_category_and_period(conn, category_id, year, month)

    def create(
        self,
        category_id: int,
        year: int,
        month: int,
        allocated_amount,
        alert_threshold: Optional[int] = None,
    ) -> Budget:
        """Create a budget for a category and month.

        If the category already has a budget for that month, that budget is
        updated instead. The spent amount starts from the expense transactions
        already recorded in the period.

        Args:
            category_id: ID of an expense category.
            year: Budget year.
            month: Budget month (1-12).
            allocated_amount: Non-negative amount to allocate.
            alert_threshold: Near-limit percentage (1-100), defaults to the
                configured default.

        Returns:
            The created (or updated) Budget.

        Raises:
            InvalidAmount: If allocated_amount is negative.
            ValueError: If the month, threshold or category is invalid.
        """
        allocated = self._validate_allocation(allocated_amount)
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {month}")
        if alert_threshold is not None:
            self._validate_threshold(alert_threshold)

        with self.db_manager.connect() as conn:
            category = conn.execute(
                "SELECT type FROM categories WHERE id = ?", (category_id,)
            ).fetchone()
            if not category:
                raise ValueError(f"Category with ID {category_id} not found")
            if category[0] != "expense":
                raise ValueError(
                    f"Budgets can only be created for expense categories (ID {category_id})"
                )

            existing = self._find_by_category_and_period(conn, category_id, year, month)

        if existing:
            logger.info(
                f"Budget for category {category_id} in {year:04d}/{month:02d} "
                f"already exists (ID: {existing.id}), updating it"
            )
            return self.update(existing.id, allocated, alert_threshold)

        threshold = alert_threshold or self.default_alert_threshold

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO budgets (category_id, year, month, allocated_amount, alert_threshold)
                VALUES (?, ?, ?, ?, ?)
                """,
                (category_id, year, month, str(allocated), threshold),
            )
            budget_id = cursor.lastrowid
            self.refresh_spent(conn, category_id, year, month)
            conn.commit()
            budget = self._find(conn, budget_id)

        logger.info(
            f"Created budget {budget.id} for category {category_id} in "
            f"{year:04d}/{month:02d}: {budget.allocated_amount} allocated, "
            f"{budget.spent_amount} already spent"
        )
        return budget

    def update(
        self, budget_id: int, allocated_amount, alert_threshold: Optional[int] = None
    ) -> Budget:
        """Update a budget's allocation and, optionally, its alert threshold.

        Category and period cannot be changed.

        Raises:
            InvalidAmount: If allocated_amount is negative.
            ValueError: If the threshold is out of range.
            Exception: If budget not found.
        """
        allocated = self._validate_allocation(allocated_amount)
        if alert_threshold is not None:
            self._validate_threshold(alert_threshold)

        with self.db_manager.connect() as conn:
            budget = self._find(conn, budget_id)
            if budget is None:
                raise Exception(f"Budget with ID {budget_id} not found")

            budget.allocated_amount = allocated
            if alert_threshold is not None:
                budget.alert_threshold = alert_threshold

            conn.execute(
                "UPDATE budgets SET allocated_amount = ?, alert_threshold = ? WHERE id = ?",
                (str(budget.allocated_amount), budget.alert_threshold, budget_id),
            )
            self._apply_alerts(conn, budget)
            conn.commit()

        return budget

    def delete(self, budget_id: int) -> bool:
        """Delete a budget by ID. Transactions are left untouched.

        Returns:
            True if budget was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM budgets WHERE id = ?", (budget_id,))
            conn.commit()
            return cursor.rowcount > 0

    def refresh_spent(
        self, conn, category_id: int, year: int, month: int
    ) -> Optional[Budget]:
        """Recompute the spent amount of a category's budget for one month.

        Runs on the caller's connection and does not commit, so the caller can
        make it part of the same unit of work as the mutation that triggered it.

        Returns:
            The refreshed Budget, or None if the category has no budget that month.
        """
        budget = self._find_by_category_and_period(conn, category_id, year, month)
        if budget is None:
            return None

        rows = conn.execute(
            """
            SELECT amount FROM transactions
            WHERE category_id = ?
              AND transaction_type = 'expense'
              AND transaction_date >= ? AND transaction_date <= ?
            """,
            (
                category_id,
                budget.start_date.isoformat(),
                budget.end_date.isoformat(),
            ),
        ).fetchall()
        budget.spent_amount = sum((to_decimal(row[0]) for row in rows), ZERO)

        conn.execute(
            "UPDATE budgets SET spent_amount = ? WHERE id = ?",
            (str(budget.spent_amount), budget.id),
        )
        self._apply_alerts(conn, budget)
        return budget

    def _apply_alerts(self, conn, budget: Budget) -> None:
        """Record any alert level the budget has newly reached."""
        level = check_alerts(budget)
        if level is None:
            return

        evaluation = evaluate(budget)
        if level == ALERT_OVER:
            budget.alert_over_sent = True
            # Going straight past the limit also covers the near-limit alert
            budget.alert_near_sent = True
            if evaluation.is_over_budget:
                state = "is over budget"
            else:
                state = "reached 100% of its allocation"
            logger.warning(
                f"Budget {budget.id} ({budget.year:04d}/{budget.month:02d}) {state}: "
                f"{budget.spent_amount} spent of {budget.allocated_amount}"
            )
        elif level == ALERT_NEAR:
            budget.alert_near_sent = True
            logger.warning(
                f"Budget {budget.id} ({budget.year:04d}/{budget.month:02d}) reached "
                f"{evaluation.spent_percentage:.0f}% of its allocation "
                f"(threshold {budget.alert_threshold}%)"
            )

        conn.execute(
            "UPDATE budgets SET alert_near_sent = ?, alert_over_sent = ? WHERE id = ?",
            (int(budget.alert_near_sent), int(budget.alert_over_sent), budget.id),
        )

    def _validate_allocation(self, allocated_amount) -> Decimal:
        allocated = to_decimal(allocated_amount)
        if allocated < 0:
            raise InvalidAmount(f"Allocated amount cannot be negative: {allocated}")
        return allocated

    def _validate_threshold(self, alert_threshold: int) -> None:
        if not 1 <= alert_threshold <= 100:
            raise ValueError(
                f"Alert threshold must be between 1 and 100, got {alert_threshold}"
            )

    def _find(self, conn, budget_id: int) -> Optional[Budget]:
        row = conn.execute(f"{_BUDGET_SELECT} WHERE id = ?", (budget_id,)).fetchone()
        return self._row_to_budget(row) if row else None

    def _find_by_category_and_period(
        self, conn, category_id: int, year: int, month: int
    ) -> Optional[Budget]:
        row = conn.execute(
            f"{_BUDGET_SELECT} WHERE category_id = ? AND year = ? AND month = ?",
            (category_id, year, month),
        ).fetchone()
        return self._row_to_budget(row) if row else None

    def _row_to_budget(self, row: tuple) -> Budget:
        """Convert a database row to a Budget object."""
        return Budget(
            id=row[0],
            category_id=row[1],
            year=row[2],
            month=row[3],
            allocated_amount=to_decimal(row[4]),
            spent_amount=to_decimal(row[5]),
            alert_threshold=row[6],
            alert_near_sent=bool(row[7]),
            alert_over_sent=bool(row[8]),
        )
