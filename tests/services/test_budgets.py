import logging
from datetime import date
from decimal import Decimal

import pytest

from tests.helpers import add_expense
from tracking.errors import InvalidAmount


class TestBudgetService:
    """Tests for BudgetService."""

    def test_create_budget(self, services, groceries):
        budget = services.budgets.create(groceries.id, 2025, 6, "500.00")

        assert budget.id > 0
        assert budget.category_id == groceries.id
        assert budget.period == (2025, 6)
        assert budget.allocated_amount == Decimal("500.00")
        assert budget.spent_amount == 0
        assert budget.alert_threshold == 80

    def test_create_uses_configured_default_threshold(self, services, groceries):
        services.budgets.default_alert_threshold = 90

        budget = services.budgets.create(groceries.id, 2025, 6, 500)

        assert budget.alert_threshold == 90

    def test_create_with_threshold(self, services, groceries):
        budget = services.budgets.create(groceries.id, 2025, 6, 500, alert_threshold=65)

        assert services.budgets.find(budget.id).alert_threshold == 65

    def test_create_counts_existing_transactions(self, services, checking, groceries):
        """Test a new budget starts from the period's recorded expenses."""
        add_expense(services, checking, groceries, "150", date(2025, 6, 2))
        add_expense(services, checking, groceries, "250", date(2025, 6, 20))

        budget = services.budgets.create(groceries.id, 2025, 6, 500)

        assert budget.spent_amount == Decimal("400")

    def test_create_zero_allocation_allowed(self, services, groceries):
        budget = services.budgets.create(groceries.id, 2025, 6, 0)

        assert budget.allocated_amount == 0

    def test_create_negative_allocation_raises(self, services, groceries):
        with pytest.raises(InvalidAmount):
            services.budgets.create(groceries.id, 2025, 6, -1)

        assert services.budgets.find_all() == []

    @pytest.mark.parametrize("amount", ["NaN", "Infinity"])
    def test_create_non_finite_allocation_raises(self, services, groceries, amount):
        with pytest.raises(ValueError, match="Invalid amount"):
            services.budgets.create(groceries.id, 2025, 6, amount)

        assert services.budgets.find_all() == []

    def test_create_invalid_month_raises(self, services, groceries):
        with pytest.raises(ValueError, match="Month must be between 1 and 12"):
            services.budgets.create(groceries.id, 2025, 13, 100)

    def test_create_invalid_threshold_raises(self, services, groceries):
        with pytest.raises(ValueError, match="Alert threshold must be between 1 and 100"):
            services.budgets.create(groceries.id, 2025, 6, 100, alert_threshold=0)

    def test_create_for_income_category_raises(self, services):
        salary = services.categories.create("Salary", "income")

        with pytest.raises(ValueError, match="expense categories"):
            services.budgets.create(salary.id, 2025, 6, 100)

    def test_create_for_unknown_category_raises(self, services):
        with pytest.raises(ValueError, match="Category with ID 9999 not found"):
            services.budgets.create(9999, 2025, 6, 100)

    def test_create_existing_period_updates_budget(self, services, groceries):
        """Test one category has at most one budget per month."""
        first = services.budgets.create(groceries.id, 2025, 6, 500)

        second = services.budgets.create(groceries.id, 2025, 6, 650, alert_threshold=70)

        assert second.id == first.id
        assert second.allocated_amount == Decimal("650")
        assert len(services.budgets.find_all()) == 1

    def test_update_budget(self, services, groceries):
        budget = services.budgets.create(groceries.id, 2025, 6, 500)

        updated = services.budgets.update(budget.id, "750", alert_threshold=95)

        assert updated.allocated_amount == Decimal("750")
        found = services.budgets.find(budget.id)
        assert found.allocated_amount == Decimal("750")
        assert found.alert_threshold == 95
        assert found.period == (2025, 6)

    def test_update_keeps_threshold_when_omitted(self, services, groceries):
        budget = services.budgets.create(groceries.id, 2025, 6, 500, alert_threshold=60)

        services.budgets.update(budget.id, 400)

        assert services.budgets.find(budget.id).alert_threshold == 60

    def test_update_nonexistent_budget_raises(self, services):
        with pytest.raises(Exception, match="Budget with ID 9999 not found"):
            services.budgets.update(9999, 100)

    def test_delete_budget_keeps_transactions(self, services, checking, groceries):
        """Test deleting a budget leaves the transaction history alone."""
        budget = services.budgets.create(groceries.id, 2025, 6, 500)
        expense = add_expense(services, checking, groceries, "42", date(2025, 6, 5))

        assert services.budgets.delete(budget.id) is True

        assert services.budgets.find(budget.id) is None
        assert services.transactions.find(expense.id) is not None

    def test_delete_nonexistent_budget(self, services):
        assert services.budgets.delete(9999) is False

    def test_find_all_most_recent_first(self, services, groceries):
        services.budgets.create(groceries.id, 2025, 3, 100)
        services.budgets.create(groceries.id, 2026, 1, 100)
        services.budgets.create(groceries.id, 2025, 11, 100)

        budgets = services.budgets.find_all()

        assert [b.period for b in budgets] == [(2026, 1), (2025, 11), (2025, 3)]

    def test_find_by_period_largest_allocation_first(self, services, groceries):
        """Test amounts are ordered numerically, not as text."""
        rent = services.categories.create("Rent")
        fun = services.categories.create("Fun")
        services.budgets.create(groceries.id, 2025, 6, "90")
        services.budgets.create(rent.id, 2025, 6, "1200")
        services.budgets.create(fun.id, 2025, 6, "300")
        services.budgets.create(fun.id, 2025, 7, "5000")

        budgets = services.budgets.find_by_period(2025, 6)

        assert [b.allocated_amount for b in budgets] == [
            Decimal("1200"),
            Decimal("300"),
            Decimal("90"),
        ]

    def test_find_by_category_and_period(self, services, groceries):
        budget = services.budgets.create(groceries.id, 2025, 6, 100)

        assert services.budgets.find_by_category_and_period(groceries.id, 2025, 6) == budget
        assert services.budgets.find_by_category_and_period(groceries.id, 2025, 7) is None


class TestBudgetAlerts:
    """Tests for alert flags recorded as spending grows."""

    def test_near_limit_alert_fires_once(self, services, checking, groceries, caplog):
        budget = services.budgets.create(groceries.id, 2025, 6, 100)

        with caplog.at_level(logging.WARNING, logger="spendwell"):
            add_expense(services, checking, groceries, "80", date(2025, 6, 1))
            add_expense(services, checking, groceries, "5", date(2025, 6, 2))

        found = services.budgets.find(budget.id)
        assert found.alert_near_sent is True
        assert found.alert_over_sent is False
        assert len([r for r in caplog.records if "reached" in r.getMessage()]) == 1

    def test_over_budget_alert(self, services, checking, groceries, caplog):
        budget = services.budgets.create(groceries.id, 2025, 6, 100)

        with caplog.at_level(logging.WARNING, logger="spendwell"):
            add_expense(services, checking, groceries, "150", date(2025, 6, 1))

        found = services.budgets.find(budget.id)
        assert found.alert_over_sent is True
        assert found.alert_near_sent is True
        assert any("over budget" in r.getMessage() for r in caplog.records)

    def test_lowering_allocation_can_trigger_alert(self, services, checking, groceries):
        budget = services.budgets.create(groceries.id, 2025, 6, 1000)
        add_expense(services, checking, groceries, "100", date(2025, 6, 1))

        services.budgets.update(budget.id, 100)

        assert services.budgets.find(budget.id).alert_over_sent is True

    def test_fully_spent_is_not_logged_as_over_budget(self, services, checking, groceries, caplog):
        """Test spending exactly the allocation is reported as reaching 100%."""
        budget = services.budgets.create(groceries.id, 2025, 6, 100)

        with caplog.at_level(logging.WARNING, logger="spendwell"):
            add_expense(services, checking, groceries, "100", date(2025, 6, 1))

        assert services.budgets.find(budget.id).alert_over_sent is True
        assert "reached 100% of its allocation" in caplog.text
        assert "over budget" not in caplog.text
