#!/usr/bin/env python3

import sys

from cli.formatting import fmt_money, fmt_pct
from errors import BudgetrError
from logger import get_logger
from tools.progress import goal_progress, total_amount

logger = get_logger()


def cmd_list(args, services):
    """List goals with their all-time progress."""
    goals = services.goals.find_all()
    if not goals:
        logger.info("No goals set.")
        return

    names = {c.id: c.name for c in services.categories.find_all()}
    logger.info("\nGoals:")
    logger.info("=" * 80)
    for goal in goals:
        entries = services.entries.list_for_category(goal.category_id)
        progress = goal_progress(goal.target_amount, total_amount(entries))
        reached = "  ✓ reached" if progress.goal_reached else ""
        logger.info(
            f"{names.get(goal.category_id, goal.category_id)}: {goal.name} "
            f"{fmt_money(progress.total_logged)} / {fmt_money(goal.target_amount)} "
            f"({fmt_pct(progress.goal_pct)}){reached}"
        )


def cmd_set(args, services):
    """Set (or replace) the goal for a category."""
    name = args.name
    if not name:
        category = services.categories.find(args.category_id)
        name = category.name if category else ""
    try:
        goal = services.goals.upsert(args.category_id, name, args.target)
    except BudgetrError as e:
        logger.error(f"Error setting goal: {e}")
        sys.exit(1)

    logger.info(f"✓ Goal '{goal.name}' set to {fmt_money(goal.target_amount)}")


def cmd_delete(args, services):
    try:
        services.goals.delete(args.category_id)
    except BudgetrError as e:
        logger.error(f"Error deleting goal: {e}")
        sys.exit(1)

    logger.info(f"✓ Goal for category {args.category_id} deleted.")


def setup_parser(subparsers):
    """Setup goals subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "goals",
        help="Long-term goals",
        description="Set, list and delete all-time category goals",
    )

    goals_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available goal commands",
        dest="subcommand",
        required=True,
    )

    list_parser = goals_subparsers.add_parser("list", help="List goals")
    list_parser.set_defaults(func=cmd_list)

    set_parser = goals_subparsers.add_parser("set", help="Set a category's goal")
    set_parser.add_argument("category_id", type=int, help="Category ID")
    set_parser.add_argument("target", help="Target amount")
    set_parser.add_argument("--name", help="Goal name (default: category name)")
    set_parser.set_defaults(func=cmd_set)

    delete_parser = goals_subparsers.add_parser("delete", help="Delete a category's goal")
    delete_parser.add_argument("category_id", type=int, help="Category ID")
    delete_parser.set_defaults(func=cmd_delete)
