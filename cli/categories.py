#!/usr/bin/env python3

import sys

from errors import BudgetrError
from logger import get_logger
from models.category import CategoryType

logger = get_logger()


def cmd_list(args, services):
    """List the owner's categories."""
    categories = services.categories.find_all()

    if not categories:
        logger.info("No categories found. Run 'python -m cli onboard' to get started.")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        label = f"{category.emoji} {category.name}" if category.emoji else category.name
        logger.info(f"ID: {category.id}  {label}  [{category.type.value}]")

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_create(args, services):
    """Create a new category."""
    try:
        category = services.categories.create(
            args.name, args.type, emoji=args.emoji, color=args.color
        )
    except BudgetrError as e:
        logger.error(f"Error creating category: {e}")
        sys.exit(1)

    logger.info(f"✓ Category '{category.name}' created with ID: {category.id}")
    logger.info("  Use 'python -m cli budget allocate' to give it a share of income.")


def cmd_delete(args, services):
    """Delete a category and everything logged against it."""
    category = services.categories.find(args.category_id)
    if not category:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    entry_count = len(services.entries.list_for_category(category.id))
    logger.info("\nCategory to delete:")
    logger.info(f"  ID: {category.id}")
    logger.info(f"  Name: {category.name}")
    logger.info(
        f"  This also deletes {entry_count} entr{'y' if entry_count == 1 else 'ies'}, "
        "its goal, its card tracker and its budget allocations."
    )

    if not args.yes:
        confirm = input("\nThis cannot be undone. Delete? (yes/no): ").strip().lower()
        if confirm != "yes":
            logger.info("Deletion cancelled.")
            return

    try:
        services.categories.delete(category.id)
    except BudgetrError as e:
        logger.error(f"Error deleting category: {e}")
        sys.exit(1)

    logger.info(f"✓ Category '{category.name}' deleted.")


def cmd_reorder(args, services):
    """Reorder categories to match the given ID order."""
    count = services.categories.reorder(
        (category_id, position) for position, category_id in enumerate(args.category_ids)
    )
    logger.info(f"✓ Reordered {count} categor{'y' if count == 1 else 'ies'}.")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, list, reorder and delete budget categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List all categories")
    list_parser.set_defaults(func=cmd_list)

    create_parser = categories_subparsers.add_parser("create", help="Create a category")
    create_parser.add_argument("name", help="Category name")
    create_parser.add_argument(
        "--type",
        default=CategoryType.SPENDING.value,
        choices=[t.value for t in CategoryType],
        help="Category type (default: spending)",
    )
    create_parser.add_argument("--emoji", help="Optional emoji")
    create_parser.add_argument("--color", help="Optional display color")
    create_parser.set_defaults(func=cmd_create)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category and all its data"
    )
    delete_parser.add_argument("category_id", type=int, help="ID of the category to delete")
    delete_parser.add_argument("--yes", action="store_true", help="Skip confirmation")
    delete_parser.set_defaults(func=cmd_delete)

    reorder_parser = categories_subparsers.add_parser(
        "reorder", help="Set the display order of categories"
    )
    reorder_parser.add_argument(
        "category_ids", type=int, nargs="+", help="Category IDs in the new order"
    )
    reorder_parser.set_defaults(func=cmd_reorder)
