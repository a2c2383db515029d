"""Goal overview tools."""

from typing import Dict, List

from models.goal import Priority
from tracking.goals import progress

_PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


def get_goal_overview(services) -> Dict[str, List[Dict]]:
    """Get all goals with their progress, split into active and completed.

    Active goals are ordered by priority (HIGH first), then by deadline
    (goals without a deadline last). Completed goals keep id order.

    Returns:
        Dictionary with "active" and "completed" lists of
        {"goal": Goal, "progress": GoalProgress} entries.
    """
    result = {"active": [], "completed": []}

    for goal in services.goals.find_all():
        entry = {"goal": goal, "progress": progress(goal)}
        result["completed" if goal.completed else "active"].append(entry)

    result["active"].sort(
        key=lambda e: (
            _PRIORITY_ORDER[e["goal"].priority],
            e["goal"].deadline is None,
            e["goal"].deadline or 0,
        )
    )
    return result
