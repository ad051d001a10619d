#!/usr/bin/env python3

from datetime import date

from cli.formatting import fmt_money, fmt_pct, month_year_arg, resolve_month, status_label
from logger import get_logger
from tools.dashboard import CategorySummary, get_month_overview

logger = get_logger()


def _log_summary(summary: CategorySummary):
    category = summary.category
    label = f"{category.emoji} {category.name}" if category.emoji else category.name
    logger.info(
        f"{label} [{category.type.value}]  {summary.allocation_pct}% = {fmt_money(summary.allocated)}"
    )

    if summary.spending:
        spending = summary.spending
        logger.info(
            f"  Spent {fmt_money(spending.spent)} ({spending.used_pct}%), "
            f"{status_label(spending.status)}"
        )
        if spending.overspent > 0:
            logger.info(f"  Overspent by {fmt_money(spending.overspent)}")
        else:
            logger.info(
                f"  {fmt_money(spending.remaining)} left, "
                f"{fmt_money(spending.daily_budget)}/day for {spending.days_left} day(s)"
            )

    if summary.contribution:
        contribution = summary.contribution
        logger.info(
            f"  This month {fmt_money(contribution.contributed)} "
            f"({fmt_pct(contribution.monthly_pct)} of monthly target), "
            f"{status_label(contribution.pace.status)}"
        )

    if summary.average_monthly > 0:
        logger.info(f"  Average per month: {fmt_money(summary.average_monthly)}")

    if summary.credit_card:
        card = summary.credit_card
        logger.info(
            f"  Bonus window: {fmt_money(card.spent)} ({fmt_pct(card.spend_pct)}), "
            f"{card.days_left} day(s) left, {status_label(card.status)}"
        )

    if summary.goal:
        goal = summary.goal
        if goal.goal_reached:
            logger.info(f"  Goal reached: {fmt_money(goal.total_logged)}")
        else:
            projection = (
                f", ~{goal.months_to_goal} month(s) to go" if goal.months_to_goal else ""
            )
            logger.info(
                f"  Goal {fmt_money(goal.total_logged)} / {fmt_money(goal.target_amount)} "
                f"({fmt_pct(goal.goal_pct)}){projection}"
            )
        logger.info(f"  Streak: {summary.streak} month(s)")


def cmd_dashboard(args, services):
    """Show progress for every category in a month."""
    today = date.today()
    month, year = resolve_month(args.month, today)
    overview = get_month_overview(services, month, year, today)

    logger.info(f"\nDashboard {year}-{month:02d}")
    logger.info("=" * 80)
    logger.info(
        f"Income {fmt_money(overview.breakdown.income)}, "
        f"{overview.breakdown.total_pct}% allocated"
    )
    if overview.breakdown.pct_discrepancy != 0:
        logger.warning(
            f"Allocations add up to {overview.breakdown.total_pct}%, not 100%"
        )

    if not overview.categories:
        logger.info("No categories yet. Run 'python -m cli onboard' to get started.")
        return

    for summary in overview.categories:
        logger.info("-" * 80)
        _log_summary(summary)


def setup_parser(subparsers):
    """Setup dashboard subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "dashboard",
        help="Monthly progress",
        description="Show spending, contributions, goals and trackers for a month",
    )
    parser.add_argument(
        "--month", type=month_year_arg, help="Month (YYYY-MM, default: current month)"
    )
    parser.set_defaults(func=cmd_dashboard)
