#!/usr/bin/env python3

import sys
from datetime import date, datetime

from cli.categories import resolve_category
from models.money import to_decimal
from models.transaction import TRANSACTION_TYPES, Transaction
from logger import get_logger

logger = get_logger()


def parse_month(value: str):
    """Parse a YYYY-MM string into a (year, month) tuple.

    Raises:
        ValueError: If the value is not a valid month.
    """
    parsed = datetime.strptime(value, "%Y-%m")
    return parsed.year, parsed.month


def cmd_add(args, services):
    """Record a transaction."""
    account = services.accounts.find_by_name(args.account)
    if not account:
        logger.error(f"Account '{args.account}' not found.")
        logger.info("Use 'python -m cli accounts list' to see available accounts.")
        sys.exit(1)

    category_id = None
    if args.category:
        category = resolve_category(services, args.category)
        if not category:
            logger.error(f"Category '{args.category}' not found.")
            logger.info("Use 'python -m cli categories list' to see available categories.")
            sys.exit(1)
        category_id = category.id

    try:
        transaction_date = (
            datetime.strptime(args.date, "%Y-%m-%d").date() if args.date else date.today()
        )
        transaction = services.transactions.create(
            Transaction(
                id=None,
                account_id=account.id,
                category_id=category_id,
                transaction_date=transaction_date,
                description=args.description or "",
                amount=to_decimal(args.amount),
                type=args.type,
            )
        )
    except Exception as e:
        logger.error(f"Error recording transaction: {e}")
        sys.exit(1)

    logger.info(f"✓ Recorded {transaction.type} of {transaction.amount} (ID: {transaction.id})")


def cmd_delete(args, services):
    """Delete a transaction by ID."""
    if not services.transactions.delete(args.transaction_id):
        logger.error(f"Transaction with ID {args.transaction_id} not found.")
        sys.exit(1)

    logger.info(f"✓ Transaction {args.transaction_id} deleted")


def cmd_list(args, services):
    """List the transactions of a month."""
    try:
        year, month = parse_month(args.month) if args.month else (
            date.today().year,
            date.today().month,
        )
    except ValueError:
        logger.error(f"Invalid month '{args.month}', expected YYYY-MM.")
        sys.exit(1)

    account_id = None
    if args.account:
        account = services.accounts.find_by_name(args.account)
        if not account:
            logger.error(f"Account '{args.account}' not found.")
            sys.exit(1)
        account_id = account.id

    transactions = services.transactions.get_transactions_by_month(
        year, month, account_id=account_id
    )

    if not transactions:
        logger.info(f"No transactions found for {year:04d}/{month:02d}.")
        return

    category_names = {c.id: c.name for c in services.categories.find_all()}
    for t in transactions:
        category = category_names.get(t.category_id, "-")
        logger.info(
            f"{t.id:>6}  {t.transaction_date}  {t.type:<8} {t.amount:>12}  "
            f"{category:<20} {t.description}"
        )

    logger.info(f"\nTotal transactions: {len(transactions)}")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Record and list transactions",
        description="Record, delete and list transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    add_parser = transactions_subparsers.add_parser("add", help="Record a transaction")
    add_parser.add_argument("amount", help="Positive amount, e.g. 42.50")
    add_parser.add_argument("--account", required=True, help="Account name")
    add_parser.add_argument("--category", help="Category ID or name")
    add_parser.add_argument(
        "--type", choices=TRANSACTION_TYPES, default="expense", help="Transaction type"
    )
    add_parser.add_argument("--date", help="Date (YYYY-MM-DD), defaults to today")
    add_parser.add_argument("--description", help="Description")
    add_parser.set_defaults(func=cmd_add)

    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction"
    )
    delete_parser.add_argument("transaction_id", type=int, help="Transaction ID")
    delete_parser.set_defaults(func=cmd_delete)

    list_parser = transactions_subparsers.add_parser("list", help="List transactions")
    list_parser.add_argument("--month", help="Month (YYYY-MM), defaults to this month")
    list_parser.add_argument("--account", help="Only this account")
    list_parser.set_defaults(func=cmd_list)
