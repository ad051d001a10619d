#!/usr/bin/env python3

import sys
from datetime import date

from cli.formatting import fmt_money, fmt_pct, status_label
from errors import BudgetrError
from logger import get_logger
from tools.credit_cards import credit_card_progress

logger = get_logger()


def cmd_list(args, services):
    """List credit card trackers with their progress as of today."""
    trackers = services.credit_cards.find_all()
    if not trackers:
        logger.info("No credit card trackers.")
        return

    entries_by_category = {t.category_id: [] for t in trackers}
    for entry in services.entries.list_for_categories(entries_by_category.keys()):
        entries_by_category[entry.category_id].append(entry)

    today = date.today()
    logger.info("\nCredit card trackers:")
    logger.info("=" * 80)
    for tracker in trackers:
        progress = credit_card_progress(tracker, entries_by_category[tracker.category_id], today)
        logger.info(f"[{tracker.id}] {tracker.card_name} ({status_label(progress.status)})")
        logger.info(
            f"  Spent {fmt_money(progress.spent)} of {fmt_money(tracker.spend_target)} "
            f"({fmt_pct(progress.spend_pct)}) for {tracker.bonus_points:,} points"
        )
        logger.info(
            f"  Window {tracker.start_date.isoformat()} to {tracker.end_date.isoformat()}, "
            f"{progress.days_left} day(s) left"
        )
        if progress.remaining > 0 and progress.days_left > 0:
            logger.info(f"  Needs {fmt_money(progress.daily_required)} per day")
        logger.info(f"  Statement paid in full: {'yes' if tracker.paid_in_full else 'no'}")
        logger.info("-" * 80)


def cmd_setup(args, services):
    """Create or replace the tracker for a credit card category."""
    try:
        tracker = services.credit_cards.upsert(
            args.category_id,
            args.card_name,
            args.spend_target,
            args.start_date or date.today(),
            bonus_points=args.bonus_points,
            end_date=args.end_date,
        )
    except BudgetrError as e:
        logger.error(f"Error setting up tracker: {e}")
        sys.exit(1)

    logger.info(
        f"✓ Tracking {tracker.card_name}: spend {fmt_money(tracker.spend_target)} "
        f"by {tracker.end_date.isoformat()} (ID: {tracker.id})"
    )


def cmd_paid(args, services):
    """Mark this month's statement as paid (or unpaid)."""
    try:
        tracker = services.credit_cards.update(args.tracker_id, paid_in_full=not args.unpaid)
    except BudgetrError as e:
        logger.error(f"Error updating tracker: {e}")
        sys.exit(1)

    state = "paid in full" if tracker.paid_in_full else "not paid"
    logger.info(f"✓ {tracker.card_name} statement marked {state}")


def cmd_delete(args, services):
    try:
        services.credit_cards.delete(args.tracker_id)
    except BudgetrError as e:
        logger.error(f"Error deleting tracker: {e}")
        sys.exit(1)

    logger.info(f"✓ Tracker {args.tracker_id} deleted.")


def setup_parser(subparsers):
    """Setup cards subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "cards",
        help="Credit card bonus trackers",
        description="Track spend toward credit card sign-up bonuses",
    )

    cards_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available tracker commands",
        dest="subcommand",
        required=True,
    )

    list_parser = cards_subparsers.add_parser("list", help="List trackers")
    list_parser.set_defaults(func=cmd_list)

    tracker_parser = cards_subparsers.add_parser("setup", help="Set up a tracker")
    tracker_parser.add_argument("category_id", type=int, help="Credit card category ID")
    tracker_parser.add_argument("card_name", help="Card name")
    tracker_parser.add_argument("spend_target", help="Spend needed for the bonus")
    tracker_parser.add_argument("--bonus-points", type=int, default=0, help="Bonus points")
    tracker_parser.add_argument("--start-date", help="Window start (YYYY-MM-DD, default: today)")
    tracker_parser.add_argument(
        "--end-date", help="Window end (YYYY-MM-DD, default: start + 90 days)"
    )
    tracker_parser.set_defaults(func=cmd_setup)

    paid_parser = cards_subparsers.add_parser("paid", help="Mark the statement paid")
    paid_parser.add_argument("tracker_id", type=int, help="Tracker ID")
    paid_parser.add_argument("--unpaid", action="store_true", help="Clear the paid flag")
    paid_parser.set_defaults(func=cmd_paid)

    delete_parser = cards_subparsers.add_parser("delete", help="Delete a tracker")
    delete_parser.add_argument("tracker_id", type=int, help="Tracker ID")
    delete_parser.set_defaults(func=cmd_delete)
