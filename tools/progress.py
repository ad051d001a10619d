"""Progress derivations for budget categories.

Pure functions over already-loaded budgets and entries. Nothing here reads
the clock or the database: "today", the month and the year are always passed
in, so every figure can be reproduced for any date.

Amounts are Decimals. Percentages handed out are floats clamped to [0, 100];
the raw ratios behind them may exceed 100 and are only used for comparisons.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Set, Tuple

from dateutil.relativedelta import relativedelta

from models.budget import Budget
from models.entry import Entry
from models.status import Status

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Spending status thresholds on the rounded used percentage
WATCH_SPENDING_PCT = 60
OVER_BUDGET_PCT = 85

# Percentage points either side of the elapsed share that still count as on track
PACE_TOLERANCE_PCT = 5


@dataclass
class Pace:
    """Actual progress compared with the share of the period that has elapsed.

    Attributes:
        expected_by_now: Amount expected at an even daily pace.
        ahead_of_pace: actual - expected_by_now (negative when behind).
        actual_pct: actual / target as a percentage, clamped to [0, 100].
        elapsed_pct: Share of the period elapsed, as a percentage.
        status: ahead_of_pace, behind, on_track, not_started or no_allocation.
    """

    expected_by_now: Decimal
    ahead_of_pace: Decimal
    actual_pct: float
    elapsed_pct: float
    status: Status


@dataclass
class SpendingProgress:
    allocated: Decimal
    spent: Decimal
    remaining: Decimal
    overspent: Decimal
    used_pct: int
    status: Status
    days_left: int
    daily_budget: Decimal
    pace: Pace


@dataclass
class ContributionProgress:
    """Progress of a saving, investment or custom category toward this month's allocation."""

    allocated: Decimal
    contributed: Decimal
    remaining: Decimal
    monthly_pct: float
    pace: Pace


@dataclass
class GoalProgress:
    target_amount: Decimal
    total_logged: Decimal
    remaining: Decimal
    goal_pct: float
    goal_reached: bool
    months_to_goal: Optional[int]


@dataclass
class AllocationLine:
    category_id: int
    allocation_pct: int
    amount: Decimal


@dataclass
class BudgetBreakdown:
    """A budget period's income split into per-category amounts.

    Attributes:
        income: Period income.
        total_pct: Sum of all allocation percentages.
        pct_discrepancy: total_pct - 100; zero when fully and exactly allocated.
        allocated_total: Sum of all allocated amounts.
        unallocated: Income not covered by any allocation (never negative).
        lines: One line per allocation.
    """

    income: Decimal
    total_pct: int
    pct_discrepancy: int
    allocated_total: Decimal
    unallocated: Decimal
    lines: List[AllocationLine] = field(default_factory=list)


def clamp_pct(value) -> float:
    """Clamp a percentage to [0, 100] for display."""
    return float(max(ZERO, min(HUNDRED, Decimal(value))))


def round_pct(value: Decimal) -> int:
    """Round a percentage half up to a whole number."""
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def allocated_amount(income, allocation_pct: int) -> Decimal:
    """Get the amount of income allocated to a category: income * pct / 100."""
    return Decimal(income) * allocation_pct / HUNDRED


def budget_breakdown(budget: Budget) -> BudgetBreakdown:
    """Split a budget's income across its allocations."""
    lines = [
        AllocationLine(
            category_id=a.category_id,
            allocation_pct=a.allocation_pct,
            amount=allocated_amount(budget.income, a.allocation_pct),
        )
        for a in budget.allocations
    ]
    allocated_total = sum((line.amount for line in lines), ZERO)
    total_pct = budget.total_pct

    return BudgetBreakdown(
        income=budget.income,
        total_pct=total_pct,
        pct_discrepancy=total_pct - 100,
        allocated_total=allocated_total,
        unallocated=max(ZERO, budget.income - allocated_total),
        lines=lines,
    )


def month_elapsed(month: int, year: int, today: date) -> Tuple[int, int]:
    """Get how far through a month today is.

    Args:
        month: Month (1-12).
        year: Year.
        today: The reference date.

    Returns:
        (days_elapsed, total_days). Past months are fully elapsed, future
        months have 0 days elapsed, and the current month counts today.
    """
    total_days = calendar.monthrange(year, month)[1]

    if (today.year, today.month) < (year, month):
        return 0, total_days
    if (today.year, today.month) > (year, month):
        return total_days, total_days
    return today.day, total_days


def pace(actual, target, days_elapsed: int, total_days: int) -> Pace:
    """Compare actual progress with an even daily pace toward a target.

    The status is ahead_of_pace when the actual share is at least 5 points
    above the elapsed share and behind when it is at least 5 points below.
    A target of 0 gives no_allocation; an actual of 0 gives not_started.
    """
    actual = Decimal(actual)
    target = Decimal(target)

    if total_days > 0:
        expected_by_now = target * days_elapsed / total_days
        elapsed_pct = Decimal(days_elapsed) * HUNDRED / total_days
    else:
        expected_by_now = ZERO
        elapsed_pct = ZERO

    if target <= 0:
        return Pace(
            expected_by_now=ZERO,
            ahead_of_pace=actual,
            actual_pct=0.0,
            elapsed_pct=clamp_pct(elapsed_pct),
            status=Status.NO_ALLOCATION,
        )

    actual_pct = actual * HUNDRED / target

    if actual == 0:
        status = Status.NOT_STARTED
    elif actual_pct >= elapsed_pct + PACE_TOLERANCE_PCT:
        status = Status.AHEAD_OF_PACE
    elif actual_pct <= elapsed_pct - PACE_TOLERANCE_PCT:
        status = Status.BEHIND
    else:
        status = Status.ON_TRACK

    return Pace(
        expected_by_now=expected_by_now,
        ahead_of_pace=actual - expected_by_now,
        actual_pct=clamp_pct(actual_pct),
        elapsed_pct=clamp_pct(elapsed_pct),
        status=status,
    )


def spending_status(used_pct: int) -> Status:
    if used_pct > OVER_BUDGET_PCT:
        return Status.OVER_BUDGET
    if used_pct > WATCH_SPENDING_PCT:
        return Status.WATCH_SPENDING
    return Status.ON_TRACK


def spending_days_left(month: int, year: int, today: date) -> int:
    """Days left in a month including today (at least 1 in the current month)."""
    days_elapsed, total_days = month_elapsed(month, year, today)
    if (today.year, today.month) == (year, month):
        return max(1, total_days - today.day + 1)
    return total_days - days_elapsed


def spending_progress(spent, allocated, today: date, month: int, year: int) -> SpendingProgress:
    """Derive a spending category's monthly progress.

    Args:
        spent: Total spent in the month.
        allocated: Amount allocated to the category for the month.
        today: Reference date for pacing and days left.
        month: Month (1-12).
        year: Year.

    Returns:
        SpendingProgress. When spent exceeds allocated, remaining is 0 and
        overspent holds the excess. An allocation of 0 reports no_allocation.
    """
    spent = Decimal(spent)
    allocated = Decimal(allocated)
    days_elapsed, total_days = month_elapsed(month, year, today)

    if allocated > 0:
        used_pct = min(100, round_pct(spent * HUNDRED / allocated))
        status = spending_status(used_pct)
    else:
        used_pct = 0
        status = Status.NO_ALLOCATION

    remaining = max(ZERO, allocated - spent)
    days_left = spending_days_left(month, year, today)

    return SpendingProgress(
        allocated=allocated,
        spent=spent,
        remaining=remaining,
        overspent=max(ZERO, spent - allocated),
        used_pct=used_pct,
        status=status,
        days_left=days_left,
        daily_budget=remaining / days_left if days_left > 0 else ZERO,
        pace=pace(spent, allocated, days_elapsed, total_days),
    )


def contribution_progress(
    contributed, allocated, today: date, month: int, year: int
) -> ContributionProgress:
    """Derive a saving, investment or custom category's monthly progress."""
    contributed = Decimal(contributed)
    allocated = Decimal(allocated)
    days_elapsed, total_days = month_elapsed(month, year, today)

    monthly_pct = clamp_pct(contributed * HUNDRED / allocated) if allocated > 0 else 0.0

    return ContributionProgress(
        allocated=allocated,
        contributed=contributed,
        remaining=max(ZERO, allocated - contributed),
        monthly_pct=monthly_pct,
        pace=pace(contributed, allocated, days_elapsed, total_days),
    )


def goal_progress(
    target_amount,
    total_logged,
    monthly_allocation=ZERO,
    average_monthly=None,
) -> GoalProgress:
    """Derive progress toward an all-time goal.

    Args:
        target_amount: Goal target.
        total_logged: All-time total logged to the category.
        monthly_allocation: This month's allocated amount, used to project
                            the months left.
        average_monthly: Average logged per active month, used for the
                         projection when there is no monthly allocation.

    Returns:
        GoalProgress. months_to_goal is None when the goal is reached or
        there is no positive monthly rate to project with.
    """
    target_amount = Decimal(target_amount)
    total_logged = Decimal(total_logged)
    remaining = max(ZERO, target_amount - total_logged)

    if target_amount > 0:
        goal_pct = clamp_pct(total_logged * HUNDRED / target_amount)
        goal_reached = total_logged >= target_amount
    else:
        goal_pct = 0.0
        goal_reached = False

    rate = Decimal(monthly_allocation or 0)
    if rate <= 0 and average_monthly is not None:
        rate = Decimal(average_monthly)

    months_to_goal = None
    if rate > 0 and remaining > 0:
        months_to_goal = int((remaining / rate).to_integral_value(rounding=ROUND_CEILING))

    return GoalProgress(
        target_amount=target_amount,
        total_logged=total_logged,
        remaining=remaining,
        goal_pct=goal_pct,
        goal_reached=goal_reached,
        months_to_goal=months_to_goal,
    )


def contribution_months(entries: Iterable[Entry]) -> Set[Tuple[int, int]]:
    """Get the distinct (year, month) pairs that have at least one entry."""
    return {(entry.year, entry.month) for entry in entries}


def savings_streak(months: Iterable[Tuple[int, int]], month: int, year: int) -> int:
    """Count consecutive months with contributions, walking back from a month.

    Args:
        months: (year, month) pairs that have a contribution.
        month: Month to start from (1-12).
        year: Year to start from.

    Returns:
        Number of consecutive months ending at (year, month); 0 if that
        month itself has no contribution.
    """
    contributed = set(months)
    streak = 0
    cursor = date(year, month, 1)

    while (cursor.year, cursor.month) in contributed:
        streak += 1
        cursor -= relativedelta(months=1)

    return streak


def total_amount(entries: Iterable[Entry]) -> Decimal:
    return sum((entry.amount for entry in entries), ZERO)


def entries_for_month(entries: Iterable[Entry], month: int, year: int) -> List[Entry]:
    return [e for e in entries if e.month == month and e.year == year]


def average_monthly(entries: Iterable[Entry]) -> Decimal:
    """Average logged per month, counting only months that have entries.

    Months without entries are not treated as zero; they are left out of
    the denominator entirely.
    """
    entries = list(entries)
    months = contribution_months(entries)
    if not months:
        return ZERO
    return total_amount(entries) / len(months)
