#!/usr/bin/env python3

import sys
from datetime import datetime

from models.goal import Priority
from tools.goals import get_goal_overview
from tracking.errors import InvalidAmount
from tracking.goals import progress
from logger import get_logger

logger = get_logger()

_PRIORITIES = [p.value for p in Priority]


def _parse_deadline(value):
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        logger.error(f"Invalid deadline '{value}', expected YYYY-MM-DD.")
        sys.exit(1)


def _log_goal(goal, goal_progress):
    deadline = f"  due {goal.deadline}" if goal.deadline else ""
    logger.info(
        f"{goal.id:>5}  {goal.name:<24} [{goal.priority.value}] "
        f"{goal.current_amount} / {goal.target_amount} "
        f"({goal_progress.progress_percentage:.0f}%){deadline}"
    )


def cmd_list(args, services):
    """List active and completed goals."""
    overview = get_goal_overview(services)

    if not overview["active"] and not overview["completed"]:
        logger.info("No goals found.")
        return

    logger.info("\nActive goals")
    logger.info("=" * 80)
    if not overview["active"]:
        logger.info("All goals completed! Create a new one.")
    for entry in overview["active"]:
        _log_goal(entry["goal"], entry["progress"])

    if overview["completed"]:
        logger.info("\nCompleted goals")
        logger.info("=" * 80)
        for entry in overview["completed"]:
            _log_goal(entry["goal"], entry["progress"])


def cmd_show(args, services):
    """Show a goal with its contribution history."""
    goal = services.goals.find(args.goal_id)
    if not goal:
        logger.error(f"Goal with ID {args.goal_id} not found.")
        sys.exit(1)

    _log_goal(goal, progress(goal))
    if goal.description:
        logger.info(f"  {goal.description}")
    if goal.savings_account_id is not None:
        account = services.accounts.find(goal.savings_account_id)
        logger.info(f"  Savings account: {account.name if account else goal.savings_account_id}")

    contributions = services.goals.find_contributions(goal.id)
    if not contributions:
        logger.info("  No contributions yet.")
        return

    logger.info("  Contributions:")
    for c in contributions:
        note = f"  {c.note}" if c.note else ""
        logger.info(f"    {c.created_at}  {c.amount:>10}  from account {c.account_id}{note}")


def cmd_create(args, services):
    """Create a new savings goal."""
    try:
        goal = services.goals.create(
            args.name,
            args.target,
            description=args.description,
            deadline=_parse_deadline(args.deadline),
            priority=Priority(args.priority),
            color=args.color,
        )
    except Exception as e:
        logger.error(f"Error creating goal: {e}")
        sys.exit(1)

    logger.info(f"✓ Goal created successfully with ID: {goal.id}")


def cmd_update(args, services):
    """Update a goal's details."""
    goal = services.goals.find(args.goal_id)
    if not goal:
        logger.error(f"Goal with ID {args.goal_id} not found.")
        sys.exit(1)

    try:
        goal = services.goals.update(
            goal.id,
            args.name or goal.name,
            args.target or goal.target_amount,
            description=args.description if args.description is not None else goal.description,
            deadline=_parse_deadline(args.deadline) or goal.deadline,
            priority=Priority(args.priority) if args.priority else goal.priority,
            color=args.color,
        )
    except Exception as e:
        logger.error(f"Error updating goal: {e}")
        sys.exit(1)

    logger.info(f"✓ Goal {goal.id} updated")


def cmd_delete(args, services):
    """Delete a goal and its contribution history."""
    if not services.goals.delete(args.goal_id):
        logger.error(f"Goal with ID {args.goal_id} not found.")
        sys.exit(1)

    logger.info(f"✓ Goal {args.goal_id} deleted")


def cmd_contribute(args, services):
    """Contribute money from an account to a goal."""
    account = services.accounts.find_by_name(args.account)
    if not account:
        logger.error(f"Account '{args.account}' not found.")
        funding = [a.name for a in services.accounts.find_funding_accounts()]
        if funding:
            logger.info(f"Accounts that can fund goals: {', '.join(funding)}")
        sys.exit(1)

    try:
        goal = services.goals.contribute(args.goal_id, account.id, args.amount, args.note)
    except InvalidAmount as e:
        logger.error(f"Invalid amount: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error adding contribution: {e}")
        sys.exit(1)

    goal_progress = progress(goal)
    logger.info(f"✓ Contribution added to '{goal.name}'")
    logger.info(
        f"  Saved: {goal.current_amount} / {goal.target_amount} "
        f"({goal_progress.progress_percentage:.0f}%)"
    )
    if goal.completed:
        logger.info("  Goal completed!")


def setup_parser(subparsers):
    """Setup goals subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "goals",
        help="Manage savings goals",
        description="Create savings goals and track contributions towards them",
    )

    goals_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available goal commands",
        dest="subcommand",
        required=True,
    )

    list_parser = goals_subparsers.add_parser("list", help="List goals")
    list_parser.set_defaults(func=cmd_list)

    show_parser = goals_subparsers.add_parser("show", help="Show a goal")
    show_parser.add_argument("goal_id", type=int, help="Goal ID")
    show_parser.set_defaults(func=cmd_show)

    create_parser = goals_subparsers.add_parser("create", help="Create a goal")
    create_parser.add_argument("name", help="Goal name")
    create_parser.add_argument("target", help="Target amount")
    create_parser.add_argument("--description", help="Description")
    create_parser.add_argument("--deadline", help="Deadline (YYYY-MM-DD)")
    create_parser.add_argument("--priority", choices=_PRIORITIES, default="MEDIUM")
    create_parser.add_argument("--color", help="Display color, e.g. #3B82F6")
    create_parser.set_defaults(func=cmd_create)

    update_parser = goals_subparsers.add_parser("update", help="Update a goal")
    update_parser.add_argument("goal_id", type=int, help="Goal ID")
    update_parser.add_argument("--name", help="New name")
    update_parser.add_argument("--target", help="New target amount")
    update_parser.add_argument("--description", help="New description")
    update_parser.add_argument("--deadline", help="New deadline (YYYY-MM-DD)")
    update_parser.add_argument("--priority", choices=_PRIORITIES)
    update_parser.add_argument("--color", help="New display color")
    update_parser.set_defaults(func=cmd_update)

    delete_parser = goals_subparsers.add_parser("delete", help="Delete a goal")
    delete_parser.add_argument("goal_id", type=int, help="Goal ID")
    delete_parser.set_defaults(func=cmd_delete)

    contribute_parser = goals_subparsers.add_parser(
        "contribute", help="Contribute to a goal"
    )
    contribute_parser.add_argument("goal_id", type=int, help="Goal ID")
    contribute_parser.add_argument("amount", help="Positive amount")
    contribute_parser.add_argument(
        "--account", required=True, help="Funding account name (not a savings account)"
    )
    contribute_parser.add_argument("--note", help="Optional note")
    contribute_parser.set_defaults(func=cmd_contribute)
