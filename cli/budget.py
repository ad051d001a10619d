#!/usr/bin/env python3

import argparse
import sys
from datetime import date

from cli.formatting import fmt_money, month_year_arg, resolve_month
from errors import BudgetrError
from logger import get_logger
from tools.progress import budget_breakdown

logger = get_logger()


def allocation_arg(value: str):
    """argparse type for CATEGORY_ID=PCT allocation arguments."""
    try:
        category_id, pct = value.split("=")
        return int(category_id), int(pct)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected CATEGORY_ID=PCT, got '{value}'")


def cmd_show(args, services):
    """Show a month's income and allocation split, creating the month if needed."""
    month, year = resolve_month(args.month, date.today())
    budget = services.budgets.get_or_create(month, year)
    breakdown = budget_breakdown(budget)
    names = {c.id: c.name for c in services.categories.find_all()}

    logger.info(f"\nBudget {year}-{month:02d}")
    logger.info("=" * 80)
    logger.info(f"Income: {fmt_money(breakdown.income)}")
    for line in breakdown.lines:
        name = names.get(line.category_id, f"#{line.category_id}")
        logger.info(f"  {name:<30} {line.allocation_pct:>3}%  {fmt_money(line.amount):>12}")

    logger.info("-" * 80)
    logger.info(f"Allocated: {breakdown.total_pct}% ({fmt_money(breakdown.allocated_total)})")
    if breakdown.unallocated > 0:
        logger.info(f"Unallocated: {fmt_money(breakdown.unallocated)}")
    if breakdown.pct_discrepancy > 0:
        logger.warning(f"Allocations exceed income by {breakdown.pct_discrepancy}%")
    elif breakdown.pct_discrepancy < 0:
        logger.warning(f"{-breakdown.pct_discrepancy}% of income is not allocated")


def cmd_income(args, services):
    """Set a month's income."""
    month, year = resolve_month(args.month, date.today())
    try:
        services.budgets.get_or_create(month, year)
        budget = services.budgets.update_income(month, year, args.income)
    except BudgetrError as e:
        logger.error(f"Error updating income: {e}")
        sys.exit(1)

    logger.info(f"✓ Income for {year}-{month:02d} set to {fmt_money(budget.income)}")


def cmd_allocate(args, services):
    """Replace a month's allocations."""
    month, year = resolve_month(args.month, date.today())
    try:
        services.budgets.get_or_create(month, year)
        budget = services.budgets.replace_allocations(month, year, args.allocations)
    except BudgetrError as e:
        logger.error(f"Error updating allocations: {e}")
        sys.exit(1)

    logger.info(
        f"✓ {len(budget.allocations)} allocation(s) saved for {year}-{month:02d} "
        f"({budget.total_pct}% of income)"
    )
    skipped = len(args.allocations) - len(budget.allocations)
    if skipped > 0:
        logger.info(f"  {skipped} allocation(s) for unknown categories were ignored")


def setup_parser(subparsers):
    """Setup budget subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "budget",
        help="Monthly income and allocations",
        description="Show and edit a month's income and category split",
    )

    budget_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available budget commands",
        dest="subcommand",
        required=True,
    )

    month_help = "Month (YYYY-MM, default: current month)"

    show_parser = budget_subparsers.add_parser("show", help="Show a month's budget")
    show_parser.add_argument("--month", type=month_year_arg, help=month_help)
    show_parser.set_defaults(func=cmd_show)

    income_parser = budget_subparsers.add_parser("income", help="Set a month's income")
    income_parser.add_argument("income", help="Monthly income")
    income_parser.add_argument("--month", type=month_year_arg, help=month_help)
    income_parser.set_defaults(func=cmd_income)

    allocate_parser = budget_subparsers.add_parser(
        "allocate", help="Replace a month's allocations"
    )
    allocate_parser.add_argument(
        "allocations",
        type=allocation_arg,
        nargs="+",
        help="CATEGORY_ID=PCT pairs; categories left out lose their allocation",
    )
    allocate_parser.add_argument("--month", type=month_year_arg, help=month_help)
    allocate_parser.set_defaults(func=cmd_allocate)
