from datetime import date
from decimal import Decimal

from models.goal import Priority
from tools.goals import get_goal_overview


class TestGetGoalOverview:
    """Tests for get_goal_overview()."""

    def test_splits_active_and_completed(self, services, checking):
        laptop = services.goals.create("Laptop", 100)
        car = services.goals.create("Car", 5000)
        services.goals.contribute(laptop.id, checking.id, 150)
        services.goals.contribute(car.id, checking.id, 1250)

        overview = get_goal_overview(services)

        assert [e["goal"].id for e in overview["active"]] == [car.id]
        assert overview["active"][0]["progress"].progress_percentage == Decimal("25")
        assert [e["goal"].id for e in overview["completed"]] == [laptop.id]
        assert overview["completed"][0]["progress"].progress_percentage == Decimal("150")

    def test_active_ordered_by_priority_then_deadline(self, services):
        low = services.goals.create("Low", 100, priority=Priority.LOW)
        open_ended = services.goals.create("Open ended", 100, priority=Priority.HIGH)
        later = services.goals.create(
            "Later", 100, deadline=date(2027, 1, 1), priority=Priority.HIGH
        )
        sooner = services.goals.create(
            "Sooner", 100, deadline=date(2026, 1, 1), priority=Priority.HIGH
        )
        medium = services.goals.create("Medium", 100)

        overview = get_goal_overview(services)

        assert [e["goal"].id for e in overview["active"]] == [
            sooner.id,
            later.id,
            open_ended.id,
            medium.id,
            low.id,
        ]

    def test_no_goals(self, services):
        assert get_goal_overview(services) == {"active": [], "completed": []}
