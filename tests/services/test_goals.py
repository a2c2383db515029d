import sqlite3
from datetime import date
from decimal import Decimal

import pytest

from models.goal import DEFAULT_GOAL_COLOR, Priority
from tracking.errors import InvalidAmount


@pytest.fixture
def goal(services):
    """An emergency fund goal with nothing saved yet."""
    return services.goals.create("Emergency fund", "1000", "Three months of rent")


class TestGoalService:
    """Tests for GoalService."""

    def test_create_goal(self, services):
        goal = services.goals.create(
            "Vacation",
            "2500.00",
            deadline=date(2026, 7, 1),
            priority=Priority.HIGH,
        )

        assert goal.id > 0
        found = services.goals.find(goal.id)
        assert found.name == "Vacation"
        assert found.target_amount == Decimal("2500.00")
        assert found.current_amount == 0
        assert found.deadline == date(2026, 7, 1)
        assert found.priority == Priority.HIGH
        assert found.color == DEFAULT_GOAL_COLOR
        assert found.completed is False

    def test_create_accepts_priority_string(self, services):
        goal = services.goals.create("Bike", 300, priority="LOW")

        assert services.goals.find(goal.id).priority == Priority.LOW

    def test_create_non_positive_target_raises(self, services):
        with pytest.raises(InvalidAmount):
            services.goals.create("Nothing", 0)

        assert services.goals.find_all() == []

    def test_create_empty_name_raises(self, services):
        with pytest.raises(ValueError, match="Goal name cannot be empty"):
            services.goals.create("", 100)

    def test_create_unknown_priority_raises(self, services):
        with pytest.raises(ValueError):
            services.goals.create("Bike", 300, priority="URGENT")

    def test_update_goal(self, services, goal):
        updated = services.goals.update(
            goal.id, "Rainy day fund", 1500, priority=Priority.HIGH, color="#10B981"
        )

        assert updated.name == "Rainy day fund"
        found = services.goals.find(goal.id)
        assert found.target_amount == Decimal("1500")
        assert found.priority == Priority.HIGH
        assert found.color == "#10B981"
        assert found.description is None

    def test_update_nonexistent_goal_raises(self, services):
        with pytest.raises(Exception, match="Goal with ID 9999 not found"):
            services.goals.update(9999, "Nope", 100)

    def test_raising_target_reopens_completed_goal(self, services, checking, goal):
        """Test completion follows the amounts when the target changes."""
        services.goals.contribute(goal.id, checking.id, 1000)
        assert services.goals.find(goal.id).completed is True

        services.goals.update(goal.id, goal.name, 2000)

        assert services.goals.find(goal.id).completed is False

    def test_lowering_target_completes_goal(self, services, checking, goal):
        services.goals.contribute(goal.id, checking.id, 600)

        updated = services.goals.update(goal.id, goal.name, 500)

        assert updated.completed is True
        assert services.goals.find(goal.id).completed is True

    def test_delete_goal_removes_contributions(self, services, checking, goal):
        services.goals.contribute(goal.id, checking.id, 100)

        assert services.goals.delete(goal.id) is True

        assert services.goals.find(goal.id) is None
        assert services.goals.find_contributions(goal.id) == []

    def test_delete_nonexistent_goal(self, services):
        assert services.goals.delete(9999) is False

    def test_find_active_and_completed(self, services, checking):
        done = services.goals.create("Laptop", 100)
        open_goal = services.goals.create("Car", 5000)
        services.goals.contribute(done.id, checking.id, 100)

        assert [g.id for g in services.goals.find_active()] == [open_goal.id]
        assert [g.id for g in services.goals.find_completed()] == [done.id]


class TestContribute:
    """Tests for GoalService.contribute()."""

    def test_contribution_updates_amount(self, services, checking, goal):
        updated = services.goals.contribute(goal.id, checking.id, "250.50", note="Payday")

        assert updated.current_amount == Decimal("250.50")
        assert updated.completed is False
        assert services.goals.find(goal.id).current_amount == Decimal("250.50")

    def test_reaching_target_completes_goal(self, services, checking, goal):
        """Test the contribution that reaches the target completes the goal."""
        services.goals.contribute(goal.id, checking.id, 400)

        updated = services.goals.contribute(goal.id, checking.id, 600)

        assert updated.current_amount == Decimal("1000")
        assert updated.completed is True
        assert services.goals.find(goal.id).completed is True

    def test_over_contribution_is_kept(self, services, checking, goal):
        updated = services.goals.contribute(goal.id, checking.id, 1200)

        assert updated.current_amount == Decimal("1200")
        assert updated.completed is True

    def test_contributions_are_recorded(self, services, checking, goal):
        services.goals.contribute(goal.id, checking.id, 10, note="first")
        services.goals.contribute(goal.id, checking.id, "20.25")

        contributions = services.goals.find_contributions(goal.id)

        assert [c.amount for c in contributions] == [Decimal("10"), Decimal("20.25")]
        assert contributions[0].note == "first"
        assert contributions[0].account_id == checking.id
        assert contributions[0].created_at is not None

    def test_amount_is_sum_of_contributions(self, services, checking, goal):
        """Test fractional contributions add up exactly."""
        for _ in range(10):
            services.goals.contribute(goal.id, checking.id, "0.10")

        assert services.goals.find(goal.id).current_amount == Decimal("1.00")

    @pytest.mark.parametrize("amount", [0, -50])
    def test_non_positive_amount_changes_nothing(self, services, checking, goal, amount):
        """Test a rejected contribution leaves no trace."""
        services.goals.contribute(goal.id, checking.id, 100)

        with pytest.raises(InvalidAmount):
            services.goals.contribute(goal.id, checking.id, amount)

        found = services.goals.find(goal.id)
        assert found.current_amount == Decimal("100")
        assert found.completed is False
        assert len(services.goals.find_contributions(goal.id)) == 1

    @pytest.mark.parametrize("amount", ["NaN", "Infinity"])
    def test_non_finite_amount_is_rejected(self, services, checking, goal, amount):
        with pytest.raises(ValueError, match="Invalid amount"):
            services.goals.contribute(goal.id, checking.id, amount)

        found = services.goals.find(goal.id)
        assert found.current_amount == 0
        assert found.completed is False
        assert services.goals.find_contributions(goal.id) == []

    def test_savings_account_cannot_fund(self, services, goal):
        savings = services.accounts.create("rainy_day", "savings")

        with pytest.raises(ValueError, match="savings account"):
            services.goals.contribute(goal.id, savings.id, 100)

        assert services.goals.find_contributions(goal.id) == []

    def test_unknown_account_raises(self, services, goal):
        with pytest.raises(ValueError, match="Account with ID 9999 not found"):
            services.goals.contribute(goal.id, 9999, 100)

    def test_unknown_goal_raises(self, services, checking):
        with pytest.raises(Exception, match="Goal with ID 9999 not found"):
            services.goals.contribute(9999, checking.id, 100)


class TestGoalSavingsAccount:
    """Tests for the savings account behind each goal."""

    def test_create_opens_savings_account(self, services, goal):
        account = services.accounts.find(goal.savings_account_id)

        assert account.type == "savings"
        assert account.name == f"Emergency fund (goal {goal.id})"
        assert services.goals.find(goal.id).savings_account_id == account.id

    def test_goals_with_same_name_get_separate_accounts(self, services):
        first = services.goals.create("Trip", 100)
        second = services.goals.create("Trip", 200)

        assert first.savings_account_id != second.savings_account_id

    def test_contribution_is_recorded_as_transfer(self, services, checking, goal):
        """Test a contribution moves money from the funding account to the goal's account."""
        services.goals.contribute(goal.id, checking.id, "125.50")

        transfers = services.transactions.find_by_account(checking.id)

        assert len(transfers) == 1
        transfer = transfers[0]
        assert transfer.type == "transfer"
        assert transfer.amount == Decimal("125.50")
        assert transfer.transfer_to_account_id == goal.savings_account_id
        assert transfer.category_id is None
        assert transfer.transaction_date == date.today()
        assert "Emergency fund Contribution" in transfer.description
        assert services.goals.find_contributions(goal.id)[0].transaction_id == transfer.id

    def test_rejected_contribution_records_no_transfer(self, services, checking, goal):
        with pytest.raises(InvalidAmount):
            services.goals.contribute(goal.id, checking.id, -5)

        assert services.transactions.find_by_account(checking.id) == []

    def test_goal_savings_account_cannot_fund_contribution(self, services, goal):
        other = services.goals.create("Car", 5000)

        with pytest.raises(ValueError, match="savings account"):
            services.goals.contribute(other.id, goal.savings_account_id, 100)

    def test_savings_accounts_are_not_funding_accounts(self, services, checking, goal):
        funding = services.accounts.find_funding_accounts()

        assert [a.id for a in funding] == [checking.id]

    def test_rename_carries_over_to_savings_account(self, services, goal):
        services.goals.update(goal.id, "Rainy day fund", 1000)

        account = services.accounts.find(goal.savings_account_id)
        assert account.name == f"Rainy day fund (goal {goal.id})"

    def test_contribution_transfer_cannot_be_deleted(self, services, checking, goal):
        """Test the transfer behind a contribution stays in the ledger."""
        services.goals.contribute(goal.id, checking.id, 100)
        contribution = services.goals.find_contributions(goal.id)[0]

        with pytest.raises(sqlite3.IntegrityError):
            services.transactions.delete(contribution.transaction_id)

        assert services.goals.find(goal.id).current_amount == Decimal("100")

    def test_delete_goal_keeps_savings_account(self, services, checking, goal):
        services.goals.contribute(goal.id, checking.id, 100)

        services.goals.delete(goal.id)

        assert services.accounts.find(goal.savings_account_id) is not None
        assert len(services.transactions.find_by_account(checking.id)) == 1
