"""Goal service for database operations.

Every goal owns a savings account. A contribution moves money into it as a
transfer transaction from a non-savings account.

current_amount and completed are derived columns: after every contribution
the saved amount is re-summed from goal_contributions and completion is
recomputed from it.
"""

from datetime import date, datetime
from typing import List, Optional

from models.goal import DEFAULT_GOAL_COLOR, Goal, GoalContribution, Priority
from models.money import ZERO, to_decimal
from models.transaction import Transaction
from tracking.errors import InvalidAmount
from tracking.goals import add_contribution, recompute_completed
from logger import get_logger

logger = get_logger("services.goals")

_GOAL_SELECT = """SELECT id, name, description, color, target_amount, current_amount,
       deadline, priority, completed, savings_account_id
FROM goals"""

_CONTRIBUTION_SELECT = """SELECT id, goal_id, account_id, amount, note, created_at, transaction_id
FROM goal_contributions"""


def savings_account_name(goal: Goal) -> str:
    """Name of the savings account backing a goal. Unique per goal."""
    return f"{goal.name} (goal {goal.id})"


class GoalService:
    """Service for managing savings goals and their contributions."""

    def __init__(self, db_manager, transactions):
        """Initialize the goal service.

        Args:
            db_manager: Database manager instance for database operations.
            transactions: TransactionService that records contribution transfers.
        """
        self.db_manager = db_manager
        self.transactions = transactions

    def find_all(self) -> List[Goal]:
        """Get all goals, ordered by id."""
        with self.db_manager.connect() as conn:
            rows = conn.execute(f"{_GOAL_SELECT} ORDER BY id").fetchall()
            return [self._row_to_goal(row) for row in rows]

    def find_active(self) -> List[Goal]:
        """Get goals that have not reached their target yet."""
        return [goal for goal in self.find_all() if not goal.completed]

    def find_completed(self) -> List[Goal]:
        return [goal for goal in self.find_all() if goal.completed]

    def find(self, goal_id: int) -> Optional[Goal]:
        """Get a single goal by ID, or None if it doesn't exist."""
        with self.db_manager.connect() as conn:
            return self._find(conn, goal_id)

    def find_contributions(self, goal_id: int) -> List[GoalContribution]:
        """Get a goal's contributions in the order they were made."""
        with self.db_manager.connect() as conn:
            rows = conn.execute(
                f"{_CONTRIBUTION_SELECT} WHERE goal_id = ? ORDER BY id",
                (goal_id,),
            ).fetchall()
            return [self._row_to_contribution(row) for row in rows]

    def create(
        self,
        name: str,
        target_amount,
        description: Optional[str] = None,
        deadline: Optional[date] = None,
        priority: Priority = Priority.MEDIUM,
        color: Optional[str] = None,
    ) -> Goal:
        """Create a new goal with nothing saved yet, and its savings account.

        Raises:
            InvalidAmount: If target_amount is not positive.
            ValueError: If name is empty or priority is unknown.
        """
        goal = Goal(
            id=None,
            name=name,
            target_amount=self._validate_target(target_amount),
            description=description,
            color=color or DEFAULT_GOAL_COLOR,
            deadline=deadline,
            priority=Priority(priority),
        )
        if not goal.name:
            raise ValueError("Goal name cannot be empty")

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO goals (name, description, color, target_amount,
                                   current_amount, deadline, priority, completed)
                VALUES (?, ?, ?, ?, ?, ?, ?, 0)
                """,
                (
                    goal.name,
                    goal.description,
                    goal.color,
                    str(goal.target_amount),
                    str(goal.current_amount),
                    goal.deadline.isoformat() if goal.deadline else None,
                    goal.priority.value,
                ),
            )
            goal.id = cursor.lastrowid

            cursor = conn.execute(
                "INSERT INTO accounts (name, type, description) VALUES (?, 'savings', ?)",
                (savings_account_name(goal), f"Savings account for goal: {goal.name}"),
            )
            goal.savings_account_id = cursor.lastrowid
            conn.execute(
                "UPDATE goals SET savings_account_id = ? WHERE id = ?",
                (goal.savings_account_id, goal.id),
            )
            conn.commit()

        logger.info(
            f"Created goal '{goal.name}' (ID: {goal.id}) targeting {goal.target_amount} "
            f"with savings account {goal.savings_account_id}"
        )
        return goal

    def update(
        self,
        goal_id: int,
        name: str,
        target_amount,
        description: Optional[str] = None,
        deadline: Optional[date] = None,
        priority: Priority = Priority.MEDIUM,
        color: Optional[str] = None,
    ) -> Goal:
        """Update a goal's details.

        The saved amount is not editable. Completion is recomputed against the
        new target, so raising the target above the saved amount reopens a
        completed goal. A new name is carried over to the savings account.

        Raises:
            InvalidAmount: If target_amount is not positive.
            Exception: If goal not found.
        """
        target = self._validate_target(target_amount)

        with self.db_manager.connect() as conn:
            goal = self._find(conn, goal_id)
            if goal is None:
                raise Exception(f"Goal with ID {goal_id} not found")

            was_completed = goal.completed
            renamed = goal.name != name
            goal.name = name
            goal.target_amount = target
            goal.description = description
            goal.deadline = deadline
            goal.priority = Priority(priority)
            if color:
                goal.color = color
            recompute_completed(goal)

            conn.execute(
                """
                UPDATE goals
                SET name = ?, description = ?, color = ?, target_amount = ?,
                    deadline = ?, priority = ?, completed = ?
                WHERE id = ?
                """,
                (
                    goal.name,
                    goal.description,
                    goal.color,
                    str(goal.target_amount),
                    goal.deadline.isoformat() if goal.deadline else None,
                    goal.priority.value,
                    int(goal.completed),
                    goal_id,
                ),
            )
            if renamed and goal.savings_account_id is not None:
                conn.execute(
                    "UPDATE accounts SET name = ?, description = ? WHERE id = ?",
                    (
                        savings_account_name(goal),
                        f"Savings account for goal: {goal.name}",
                        goal.savings_account_id,
                    ),
                )
            conn.commit()

        if was_completed and not goal.completed:
            logger.info(f"Goal '{goal.name}' (ID: {goal_id}) reopened by new target {target}")
        return goal

    def delete(self, goal_id: int) -> bool:
        """Delete a goal together with its contribution history.

        The savings account and the transfers into it stay in the ledger.

        Returns:
            True if goal was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            conn.execute("DELETE FROM goal_contributions WHERE goal_id = ?", (goal_id,))
            cursor = conn.execute("DELETE FROM goals WHERE id = ?", (goal_id,))
            conn.commit()
            return cursor.rowcount > 0

    def contribute(
        self, goal_id: int, account_id: int, amount, note: Optional[str] = None
    ) -> Goal:
        """Add a contribution to a goal.

        The money moves as a transfer transaction from the funding account to
        the goal's savings account. Transfer, contribution and the goal's new
        saved amount are committed together.

        Args:
            goal_id: Goal receiving the money.
            account_id: Account funding the contribution; savings accounts are
                not allowed.
            amount: Positive amount.
            note: Optional note.

        Returns:
            The goal with its new saved amount and completion status.

        Raises:
            InvalidAmount: If amount is not positive. Nothing is recorded.
            ValueError: If the amount is not a finite number, or the account
                doesn't exist or is a savings account.
            Exception: If goal not found.
        """
        contribution = GoalContribution(
            goal_id=goal_id, account_id=account_id, amount=to_decimal(amount), note=note
        )

        with self.db_manager.connect() as conn:
            goal = self._find(conn, goal_id)
            if goal is None:
                raise Exception(f"Goal with ID {goal_id} not found")

            account = conn.execute(
                "SELECT type FROM accounts WHERE id = ?", (account_id,)
            ).fetchone()
            if not account:
                raise ValueError(f"Account with ID {account_id} not found")
            if account[0] == "savings":
                raise ValueError(
                    f"Account {account_id} is a savings account and cannot fund a contribution"
                )

            was_completed = goal.completed
            # Raises InvalidAmount before anything is written
            add_contribution(goal, contribution)

            today = date.today()
            transfer = self.transactions.insert(
                conn,
                Transaction(
                    id=None,
                    account_id=account_id,
                    transaction_date=today,
                    description=f"{today:%b %d, %Y} {goal.name} Contribution",
                    amount=contribution.amount,
                    type="transfer",
                    transfer_to_account_id=goal.savings_account_id,
                ),
            )
            contribution.transaction_id = transfer.id

            conn.execute(
                """
                INSERT INTO goal_contributions (goal_id, account_id, amount, note, transaction_id)
                VALUES (?, ?, ?, ?, ?)
                """,
                (goal_id, account_id, str(contribution.amount), note, transfer.id),
            )
            self._refresh_progress(conn, goal)
            conn.commit()

        logger.info(
            f"Contributed {contribution.amount} to goal '{goal.name}' (ID: {goal_id}) "
            f"from account {account_id} (transaction {transfer.id})"
        )
        if goal.completed and not was_completed:
            logger.info(f"Goal '{goal.name}' (ID: {goal_id}) completed")
        return goal

    def _refresh_progress(self, conn, goal: Goal) -> None:
        """Re-sum the goal's contributions and store amount and completion."""
        rows = conn.execute(
            "SELECT amount FROM goal_contributions WHERE goal_id = ?", (goal.id,)
        ).fetchall()
        goal.current_amount = sum((to_decimal(row[0]) for row in rows), ZERO)
        recompute_completed(goal)

        conn.execute(
            "UPDATE goals SET current_amount = ?, completed = ? WHERE id = ?",
            (str(goal.current_amount), int(goal.completed), goal.id),
        )

    def _validate_target(self, target_amount):
        target = to_decimal(target_amount)
        if target <= 0:
            raise InvalidAmount(f"Target amount must be positive: {target}")
        return target

    def _find(self, conn, goal_id: int) -> Optional[Goal]:
        row = conn.execute(f"{_GOAL_SELECT} WHERE id = ?", (goal_id,)).fetchone()
        return self._row_to_goal(row) if row else None

    def _row_to_goal(self, row: tuple) -> Goal:
        """Convert a database row to a Goal object."""
        return Goal(
            id=row[0],
            name=row[1],
            description=row[2],
            color=row[3],
            target_amount=to_decimal(row[4]),
            current_amount=to_decimal(row[5]),
            deadline=date.fromisoformat(row[6]) if row[6] else None,
            priority=Priority(row[7]),
            completed=bool(row[8]),
            savings_account_id=row[9],
        )

    def _row_to_contribution(self, row: tuple) -> GoalContribution:
        return GoalContribution(
            id=row[0],
            goal_id=row[1],
            account_id=row[2],
            amount=to_decimal(row[3]),
            note=row[4],
            created_at=datetime.fromisoformat(row[5]) if row[5] else None,
            transaction_id=row[6],
        )
