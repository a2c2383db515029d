#!/usr/bin/env python3

import sys
from datetime import date

from cli.categories import resolve_category
from cli.transactions import parse_month
from tools.budgets import compare_periods, get_budget_overview, summarize_budget
from logger import get_logger

logger = get_logger()

_STATUS_LABELS = {
    "ok": "",
    "near_limit": "  [NEAR LIMIT]",
    "over_budget": "  [OVER BUDGET]",
}


def _log_summary(summary):
    budget = summary["budget"]
    evaluation = summary["evaluation"]
    logger.info(
        f"{budget.id:>5}  {budget.year:04d}/{budget.month:02d}  "
        f"{summary['category_name']:<20} "
        f"{budget.spent_amount:>10} / {budget.allocated_amount:<10} "
        f"{evaluation.spent_percentage:>5.1f}%  "
        f"remaining {evaluation.remaining}"
        f"{_STATUS_LABELS[evaluation.status]}"
    )


def _log_page(title, page):
    if not page.total_elements:
        return
    logger.info(f"\n{title}")
    logger.info("=" * 80)
    for summary in page.items:
        _log_summary(summary)
    if page.total_pages > 1:
        logger.info(
            f"Showing {page.first_index} to {page.last_index} of "
            f"{page.total_elements} budgets (page {page.page + 1}/{page.total_pages})"
        )


def _read_month(value):
    try:
        return parse_month(value) if value else (date.today().year, date.today().month)
    except ValueError:
        logger.error(f"Invalid month '{value}', expected YYYY-MM.")
        sys.exit(1)


def cmd_list(args, services):
    """List budgets grouped into this month, upcoming and past."""
    overview = get_budget_overview(
        services,
        current_page=args.page,
        past_page=args.past_page,
        future_page=args.future_page,
    )

    if not any(page.total_elements for page in overview.values()):
        logger.info("No budgets found.")
        return

    _log_page("This month", overview["current"])
    _log_page("Upcoming", overview["future"])
    _log_page("Past", overview["past"])


def cmd_show(args, services):
    """Show a single budget with its utilization."""
    budget = services.budgets.find(args.budget_id)
    if not budget:
        logger.error(f"Budget with ID {args.budget_id} not found.")
        sys.exit(1)

    category_names = {c.id: c.name for c in services.categories.find_all()}
    summary = summarize_budget(budget, category_names)
    evaluation = summary["evaluation"]

    logger.info(f"Budget {budget.id}: {summary['category_name']} {budget.year:04d}/{budget.month:02d}")
    logger.info(f"  Allocated: {budget.allocated_amount}")
    logger.info(f"  Spent: {budget.spent_amount} ({evaluation.spent_percentage:.1f}%)")
    logger.info(f"  Remaining: {evaluation.remaining}")
    logger.info(f"  Alert threshold: {budget.alert_threshold}%")
    logger.info(f"  Status: {evaluation.status}")


def cmd_create(args, services):
    """Create (or update) the budget of a category for a month."""
    category = resolve_category(services, args.category)
    if not category:
        logger.error(f"Category '{args.category}' not found.")
        logger.info("Use 'python -m cli categories list' to see available categories.")
        sys.exit(1)

    year, month = _read_month(args.month)

    try:
        budget = services.budgets.create(
            category.id, year, month, args.amount, args.threshold
        )
    except Exception as e:
        logger.error(f"Error creating budget: {e}")
        sys.exit(1)

    logger.info(f"✓ Budget saved with ID: {budget.id}")
    _log_summary(summarize_budget(budget, {category.id: category.name}))


def cmd_update(args, services):
    """Change a budget's allocation and threshold."""
    try:
        budget = services.budgets.update(args.budget_id, args.amount, args.threshold)
    except Exception as e:
        logger.error(f"Error updating budget: {e}")
        sys.exit(1)

    logger.info(f"✓ Budget {budget.id} updated")


def cmd_delete(args, services):
    """Delete a budget. Its transactions are kept."""
    if not services.budgets.delete(args.budget_id):
        logger.error(f"Budget with ID {args.budget_id} not found.")
        sys.exit(1)

    logger.info(f"✓ Budget {args.budget_id} deleted")


def cmd_compare(args, services):
    """Compare the budgets of two months."""
    year1, month1 = _read_month(args.first)
    year2, month2 = _read_month(args.second)

    comparison = compare_periods(services, year1, month1, year2, month2)
    category_names = {c.id: c.name for c in services.categories.find_all()}

    for period, totals in comparison["periods"].items():
        logger.info(
            f"{period}: allocated {totals['allocated']}, spent {totals['spent']}, "
            f"remaining {totals['remaining']}, {totals['over_budget_count']} over budget"
        )

    logger.info("-" * 80)
    for category_id, periods in comparison["categories"].items():
        cells = [
            f"{period} {budget.spent_amount}/{budget.allocated_amount}" if budget else f"{period} -"
            for period, budget in periods.items()
        ]
        logger.info(f"{category_names.get(category_id, 'Unknown'):<20} " + "   ".join(cells))


def setup_parser(subparsers):
    """Setup budgets subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "budgets",
        help="Manage monthly budgets",
        description="Create monthly category budgets and track their utilization",
    )

    budgets_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available budget commands",
        dest="subcommand",
        required=True,
    )

    list_parser = budgets_subparsers.add_parser("list", help="List budgets")
    list_parser.add_argument("--page", type=int, default=0, help="Page of this month's budgets")
    list_parser.add_argument("--past-page", type=int, default=0, help="Page of past budgets")
    list_parser.add_argument("--future-page", type=int, default=0, help="Page of upcoming budgets")
    list_parser.set_defaults(func=cmd_list)

    show_parser = budgets_subparsers.add_parser("show", help="Show a budget")
    show_parser.add_argument("budget_id", type=int, help="Budget ID")
    show_parser.set_defaults(func=cmd_show)

    create_parser = budgets_subparsers.add_parser("create", help="Create a budget")
    create_parser.add_argument("category", help="Expense category ID or name")
    create_parser.add_argument("amount", help="Amount to allocate")
    create_parser.add_argument("--month", help="Month (YYYY-MM), defaults to this month")
    create_parser.add_argument("--threshold", type=int, help="Alert threshold percentage (1-100)")
    create_parser.set_defaults(func=cmd_create)

    update_parser = budgets_subparsers.add_parser("update", help="Update a budget")
    update_parser.add_argument("budget_id", type=int, help="Budget ID")
    update_parser.add_argument("amount", help="New amount to allocate")
    update_parser.add_argument("--threshold", type=int, help="Alert threshold percentage (1-100)")
    update_parser.set_defaults(func=cmd_update)

    delete_parser = budgets_subparsers.add_parser("delete", help="Delete a budget")
    delete_parser.add_argument("budget_id", type=int, help="Budget ID")
    delete_parser.set_defaults(func=cmd_delete)

    compare_parser = budgets_subparsers.add_parser("compare", help="Compare two months")
    compare_parser.add_argument("first", help="First month (YYYY-MM)")
    compare_parser.add_argument("second", help="Second month (YYYY-MM)")
    compare_parser.set_defaults(func=cmd_compare)
