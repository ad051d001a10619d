"""Progress derivation for credit card sign-up bonus trackers.

The spend window is its own rule: it runs from the tracker's start date to
its end date (both inclusive) and is unrelated to calendar months.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from models.credit_card_tracker import CreditCardTracker
from models.entry import Entry
from models.status import Status
from tools.progress import HUNDRED, ZERO, clamp_pct

# Days left at or below which an unfinished tracker is urgent
URGENT_DAYS = 7


@dataclass
class CreditCardProgress:
    """Derived state of a credit card tracker on a given day.

    Attributes:
        spent: Spend logged inside the window.
        remaining: Spend still needed (never negative).
        spend_pct: spent / target as a percentage, clamped to [0, 100].
        total_days: Length of the window in days, both ends included.
        days_elapsed: Days since the window started, capped at total_days.
        days_left: Days until the window ends (0 once it has ended).
        expected_by_now: Spend expected at an even daily pace.
        ahead_of_pace: spent - expected_by_now.
        daily_required: Spend per day needed to finish in time (0 when no days are left).
        status: complete, expired, urgent, behind or on_track.
        bonus_points: Points earned on completion.
        paid_in_full: Whether this billing month's statement was paid off.
    """

    spent: Decimal
    remaining: Decimal
    spend_pct: float
    total_days: int
    days_elapsed: int
    days_left: int
    expected_by_now: Decimal
    ahead_of_pace: Decimal
    daily_required: Decimal
    status: Status
    bonus_points: int
    paid_in_full: bool


def spend_in_window(tracker: CreditCardTracker, entries: Iterable[Entry]) -> Decimal:
    """Sum the entries dated inside the tracker's window.

    Entries outside [start_date, end_date] never count, even when they are
    logged against the tracker's category.
    """
    return sum(
        (
            entry.amount
            for entry in entries
            if tracker.start_date <= entry.entry_date <= tracker.end_date
        ),
        ZERO,
    )


def credit_card_status(
    is_complete: bool, today: date, end_date: date, days_left: int, ahead_of_pace: Decimal
) -> Status:
    """Pick a tracker's status; earlier rules take priority."""
    if is_complete:
        return Status.COMPLETE
    if today > end_date:
        return Status.EXPIRED
    if days_left <= URGENT_DAYS:
        return Status.URGENT
    if ahead_of_pace < 0:
        return Status.BEHIND
    return Status.ON_TRACK


def credit_card_progress(
    tracker: CreditCardTracker, entries: Iterable[Entry], today: date
) -> CreditCardProgress:
    """Derive a tracker's progress as of today.

    Args:
        tracker: The tracker.
        entries: Entries of the tracker's category (any dates).
        today: Reference date.

    Returns:
        CreditCardProgress.
    """
    target = tracker.spend_target
    spent = spend_in_window(tracker, entries)
    remaining = max(ZERO, target - spent)

    total_days = (tracker.end_date - tracker.start_date).days + 1
    days_elapsed = min(total_days, max(0, (today - tracker.start_date).days))
    days_left = max(0, (tracker.end_date - today).days)

    expected_by_now = target * days_elapsed / total_days if total_days > 0 else ZERO
    ahead_of_pace = spent - expected_by_now
    daily_required = remaining / days_left if days_left > 0 else ZERO

    is_complete = target > 0 and spent >= target

    return CreditCardProgress(
        spent=spent,
        remaining=remaining,
        spend_pct=clamp_pct(spent * HUNDRED / target) if target > 0 else 0.0,
        total_days=total_days,
        days_elapsed=days_elapsed,
        days_left=days_left,
        expected_by_now=expected_by_now,
        ahead_of_pace=ahead_of_pace,
        daily_required=daily_required,
        status=credit_card_status(
            is_complete, today, tracker.end_date, days_left, ahead_of_pace
        ),
        bonus_points=tracker.bonus_points,
        paid_in_full=tracker.paid_in_full,
    )
