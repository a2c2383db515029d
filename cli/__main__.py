#!/usr/bin/env python3
"""
Spendwell CLI - track monthly budgets and savings goals.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    accounts     Manage accounts
    categories   Manage income and expense categories
    transactions Record and list transactions
    budgets      Monthly category budgets
    goals        Savings goals and contributions
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli accounts create main_checking --type checking
    python -m cli categories create Groceries
    python -m cli budgets create Groceries 500 --month 2025-06
    python -m cli transactions add 42.50 --account main_checking --category Groceries
    python -m cli goals create "Emergency fund" 1000
    python -m cli goals contribute 1 100 --account main_checking
"""

import sys
import argparse
from cli import accounts, budgets, categories, goals, migrate, transactions
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging

# Commands that go through the services container; migrate needs the raw db_manager
_SERVICE_COMMANDS = ("accounts", "categories", "transactions", "budgets", "goals")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every command registered."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Spendwell - Personal budgets and savings goals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    for command in (accounts, categories, transactions, budgets, goals, migrate):
        command.setup_parser(subparsers)

    return parser


def main():
    """Main CLI entry point with subcommands."""
    parser = build_parser()
    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    try:
        config = load_config()
        setup_logging(config)

        if args.command in _SERVICE_COMMANDS:
            args.func(args, Services(config))
        elif args.command == "migrate":
            args.func(args, DatabaseManager(config))
        else:
            args.func(args)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
