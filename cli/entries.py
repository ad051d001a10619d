#!/usr/bin/env python3

import sys
from datetime import date

from cli.formatting import fmt_money, month_year_arg
from errors import BudgetrError
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List entries for a category, newest first."""
    category = services.categories.find(args.category_id)
    if not category:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    if args.month:
        month, year = args.month
        entries = services.entries.list_for_category(category.id, month, year)
        scope = f"{year}-{month:02d}"
    else:
        entries = services.entries.list_for_category(category.id)
        scope = "all time"

    if not entries:
        logger.info(f"No entries for {category.name} ({scope}).")
        return

    logger.info(f"\n{category.name} ({scope}):")
    logger.info("=" * 80)
    for entry in entries:
        description = f"  {entry.description}" if entry.description else ""
        logger.info(
            f"[{entry.id}] {entry.entry_date.isoformat()}  {fmt_money(entry.amount):>12}{description}"
        )

    total = sum(entry.amount for entry in entries)
    logger.info("-" * 80)
    logger.info(f"Total: {fmt_money(total)} across {len(entries)} entries")


def cmd_add(args, services):
    """Log an entry against a category."""
    try:
        entry = services.entries.create(
            args.category_id,
            args.amount,
            args.date or date.today(),
            args.description,
        )
    except BudgetrError as e:
        logger.error(f"Error adding entry: {e}")
        sys.exit(1)

    logger.info(
        f"✓ Logged {fmt_money(entry.amount)} on {entry.entry_date.isoformat()} (ID: {entry.id})"
    )


def cmd_edit(args, services):
    """Edit an entry's amount, date or description."""
    changes = {}
    if args.amount is not None:
        changes["amount"] = args.amount
    if args.date is not None:
        changes["entry_date"] = args.date
    if args.clear_description:
        changes["description"] = None
    elif args.description is not None:
        changes["description"] = args.description

    try:
        entry = services.entries.update(args.entry_id, **changes)
    except BudgetrError as e:
        logger.error(f"Error editing entry: {e}")
        sys.exit(1)

    logger.info(
        f"✓ Entry {entry.id}: {fmt_money(entry.amount)} on {entry.entry_date.isoformat()}"
    )


def cmd_delete(args, services):
    try:
        services.entries.delete(args.entry_id)
    except BudgetrError as e:
        logger.error(f"Error deleting entry: {e}")
        sys.exit(1)

    logger.info(f"✓ Entry {args.entry_id} deleted.")


def setup_parser(subparsers):
    """Setup entries subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "entries",
        help="Log and manage entries",
        description="Log, list, edit and delete dated entries",
    )

    entries_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available entry commands",
        dest="subcommand",
        required=True,
    )

    list_parser = entries_subparsers.add_parser("list", help="List entries for a category")
    list_parser.add_argument("category_id", type=int, help="Category ID")
    list_parser.add_argument(
        "--month", type=month_year_arg, help="Only this month (YYYY-MM)"
    )
    list_parser.set_defaults(func=cmd_list)

    add_parser = entries_subparsers.add_parser("add", help="Log an entry")
    add_parser.add_argument("category_id", type=int, help="Category ID")
    add_parser.add_argument("amount", help="Amount (positive)")
    add_parser.add_argument("--date", help="Date (YYYY-MM-DD, default: today)")
    add_parser.add_argument("--description", help="Optional description")
    add_parser.set_defaults(func=cmd_add)

    edit_parser = entries_subparsers.add_parser("edit", help="Edit an entry")
    edit_parser.add_argument("entry_id", type=int, help="Entry ID")
    edit_parser.add_argument("--amount", help="New amount")
    edit_parser.add_argument("--date", help="New date (YYYY-MM-DD)")
    edit_parser.add_argument("--description", help="New description")
    edit_parser.add_argument(
        "--clear-description", action="store_true", help="Remove the description"
    )
    edit_parser.set_defaults(func=cmd_edit)

    delete_parser = entries_subparsers.add_parser("delete", help="Delete an entry")
    delete_parser.add_argument("entry_id", type=int, help="Entry ID")
    delete_parser.set_defaults(func=cmd_delete)
