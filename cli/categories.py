#!/usr/bin/env python3

import sys
from models.category import CATEGORY_TYPES
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List categories, optionally only one type."""
    categories = services.categories.find_all(args.type)

    if not categories:
        logger.info("No categories found.")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        logger.info(f"ID: {category.id}")
        logger.info(f"Name: {category.name}")
        logger.info(f"Type: {category.type}")
        if category.description:
            logger.info(f"Description: {category.description}")
        if category.color:
            logger.info(f"Color: {category.color}")
        logger.info("-" * 80)

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_create(args, services):
    """Create a new category."""
    name = args.name.strip()
    if not name:
        logger.error("Category name cannot be empty.")
        sys.exit(1)

    try:
        category = services.categories.create(
            name, args.type, args.description, args.color
        )
    except Exception as e:
        logger.error(f"Error creating category: {e}")
        sys.exit(1)

    logger.info(f"\n✓ Category created successfully with ID: {category.id}")
    logger.info(f"  Name: {category.name}")
    logger.info(f"  Type: {category.type}")


def resolve_category(services, category_input: str):
    """Look up a category by ID, falling back to its name.

    Returns:
        Category, or None if nothing matches.
    """
    try:
        return services.categories.find(int(category_input))
    except ValueError:
        return services.categories.find_by_name(category_input)


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create and list income and expense categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List categories")
    list_parser.add_argument("--type", choices=CATEGORY_TYPES, help="Only this type")
    list_parser.set_defaults(func=cmd_list)

    create_parser = categories_subparsers.add_parser("create", help="Create a category")
    create_parser.add_argument("name", help="Category name, e.g. Groceries")
    create_parser.add_argument(
        "--type", choices=CATEGORY_TYPES, default="expense", help="Category type"
    )
    create_parser.add_argument("--description", help="What belongs in this category")
    create_parser.add_argument("--color", help="Display color, e.g. #22C55E")
    create_parser.set_defaults(func=cmd_create)
