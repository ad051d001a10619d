import pytest
from datetime import date
from decimal import Decimal

from models.budget import Allocation, Budget
from models.entry import Entry
from models.status import Status
from tools.progress import (
    allocated_amount,
    average_monthly,
    budget_breakdown,
    clamp_pct,
    contribution_months,
    contribution_progress,
    goal_progress,
    month_elapsed,
    pace,
    savings_streak,
    spending_progress,
    spending_status,
)


def make_entry(amount, entry_date, category_id=1, entry_id=None):
    return Entry(
        id=entry_id,
        owner_id="alice",
        category_id=category_id,
        amount=Decimal(str(amount)),
        entry_date=entry_date,
    )


class TestBudgetBreakdown:
    """Tests for budget_breakdown and allocated_amount."""

    def test_income_split_by_percentage(self):
        budget = Budget(
            id=1,
            owner_id="alice",
            month=4,
            year=2025,
            income=Decimal("4000"),
            allocations=[Allocation(1, 30), Allocation(2, 40), Allocation(3, 30)],
        )

        breakdown = budget_breakdown(budget)

        assert [line.amount for line in breakdown.lines] == [
            Decimal("1200"),
            Decimal("1600"),
            Decimal("1200"),
        ]
        assert breakdown.total_pct == 100
        assert breakdown.pct_discrepancy == 0
        assert breakdown.allocated_total == Decimal("4000")
        assert breakdown.unallocated == Decimal("0")

    def test_under_allocated_budget(self):
        budget = Budget(1, "alice", 4, 2025, Decimal("1000"), [Allocation(1, 70)])

        breakdown = budget_breakdown(budget)

        assert breakdown.pct_discrepancy == -30
        assert breakdown.unallocated == Decimal("300")

    def test_over_allocated_budget(self):
        budget = Budget(1, "alice", 4, 2025, Decimal("1000"), [Allocation(1, 70), Allocation(2, 50)])

        breakdown = budget_breakdown(budget)

        assert breakdown.pct_discrepancy == 20
        assert breakdown.allocated_total == Decimal("1200")
        assert breakdown.unallocated == Decimal("0")

    def test_allocated_amount_keeps_cents(self):
        assert allocated_amount(Decimal("3333.33"), 10) == Decimal("333.333")


class TestMonthElapsed:
    """Tests for month_elapsed."""

    def test_current_month_counts_today(self):
        assert month_elapsed(4, 2025, date(2025, 4, 10)) == (10, 30)

    def test_past_month_fully_elapsed(self):
        assert month_elapsed(2, 2024, date(2025, 4, 10)) == (29, 29)

    def test_future_month_not_started(self):
        assert month_elapsed(1, 2026, date(2025, 12, 31)) == (0, 31)


class TestPace:
    """Tests for pace."""

    def test_on_track_within_tolerance(self):
        result = pace(Decimal("520"), Decimal("1000"), 15, 30)

        assert result.expected_by_now == Decimal("500")
        assert result.ahead_of_pace == Decimal("20")
        assert result.status == Status.ON_TRACK

    def test_ahead_of_pace(self):
        assert pace(550, 1000, 15, 30).status == Status.AHEAD_OF_PACE

    def test_behind(self):
        assert pace(450, 1000, 15, 30).status == Status.BEHIND

    def test_not_started(self):
        assert pace(0, 1000, 15, 30).status == Status.NOT_STARTED

    def test_zero_target_is_no_allocation(self):
        result = pace(50, 0, 15, 30)

        assert result.status == Status.NO_ALLOCATION
        assert result.actual_pct == 0.0
        assert result.expected_by_now == Decimal("0")

    def test_actual_pct_clamped(self):
        assert pace(3000, 1000, 30, 30).actual_pct == 100.0


class TestSpendingProgress:
    """Tests for spending_progress and spending_status."""

    def test_day_ten_of_thirty_day_month(self):
        """400 of 1200 spent on day 10 of 30 is a third of the way, on track."""
        progress = spending_progress(
            Decimal("400"), Decimal("1200"), date(2025, 4, 10), 4, 2025
        )

        assert progress.used_pct == 33
        assert progress.status == Status.ON_TRACK
        assert progress.remaining == Decimal("800")
        assert progress.overspent == Decimal("0")
        assert progress.days_left == 21
        assert progress.daily_budget == Decimal("800") / 21
        assert progress.pace.expected_by_now == Decimal("400")
        assert progress.pace.status == Status.ON_TRACK

    def test_overspent(self):
        progress = spending_progress(1300, 1200, date(2025, 4, 20), 4, 2025)

        assert progress.used_pct == 100
        assert progress.remaining == Decimal("0")
        assert progress.overspent == Decimal("100")
        assert progress.status == Status.OVER_BUDGET
        assert progress.daily_budget == Decimal("0")

    def test_zero_allocation(self):
        progress = spending_progress(50, 0, date(2025, 4, 20), 4, 2025)

        assert progress.status == Status.NO_ALLOCATION
        assert progress.used_pct == 0
        assert progress.overspent == Decimal("50")

    def test_last_day_of_month_has_one_day_left(self):
        progress = spending_progress(0, 300, date(2025, 4, 30), 4, 2025)

        assert progress.days_left == 1
        assert progress.daily_budget == Decimal("300")

    def test_past_month_has_no_days_left(self):
        progress = spending_progress(100, 300, date(2025, 5, 3), 4, 2025)

        assert progress.days_left == 0
        assert progress.daily_budget == Decimal("0")

    @pytest.mark.parametrize(
        "used_pct, expected",
        [
            (0, Status.ON_TRACK),
            (60, Status.ON_TRACK),
            (61, Status.WATCH_SPENDING),
            (85, Status.WATCH_SPENDING),
            (86, Status.OVER_BUDGET),
            (100, Status.OVER_BUDGET),
        ],
    )
    def test_spending_status_thresholds(self, used_pct, expected):
        assert spending_status(used_pct) == expected


class TestContributionProgress:
    """Tests for contribution_progress."""

    def test_halfway_on_day_fifteen(self):
        progress = contribution_progress(800, 1600, date(2025, 4, 15), 4, 2025)

        assert progress.monthly_pct == 50.0
        assert progress.remaining == Decimal("800")
        assert progress.pace.status == Status.ON_TRACK

    def test_more_than_allocated_is_clamped(self):
        progress = contribution_progress(2000, 1600, date(2025, 4, 15), 4, 2025)

        assert progress.monthly_pct == 100.0
        assert progress.remaining == Decimal("0")
        assert progress.pace.status == Status.AHEAD_OF_PACE

    def test_zero_allocation(self):
        progress = contribution_progress(100, 0, date(2025, 4, 15), 4, 2025)

        assert progress.monthly_pct == 0.0
        assert progress.pace.status == Status.NO_ALLOCATION


class TestGoalProgress:
    """Tests for goal_progress."""

    def test_goal_reached(self):
        progress = goal_progress(Decimal("5000"), Decimal("5000"))

        assert progress.goal_reached is True
        assert progress.goal_pct == 100.0
        assert progress.remaining == Decimal("0")
        assert progress.months_to_goal is None

    def test_goal_reached_regardless_of_allocation(self):
        progress = goal_progress(5000, 5000, monthly_allocation=Decimal("0"))

        assert progress.goal_reached is True

    def test_months_to_goal_from_allocation(self):
        progress = goal_progress(5000, 2000, monthly_allocation=Decimal("1000"))

        assert progress.goal_pct == 40.0
        assert progress.months_to_goal == 3

    def test_months_to_goal_rounds_up(self):
        assert goal_progress(5000, 2000, monthly_allocation=Decimal("700")).months_to_goal == 5

    def test_months_to_goal_falls_back_to_average(self):
        progress = goal_progress(5000, 2000, average_monthly=Decimal("1500"))

        assert progress.months_to_goal == 2

    def test_months_to_goal_unknown_without_rate(self):
        assert goal_progress(5000, 2000).months_to_goal is None

    def test_zero_target(self):
        progress = goal_progress(0, 100)

        assert progress.goal_pct == 0.0
        assert progress.goal_reached is False


class TestStreakAndAverages:
    """Tests for savings_streak, contribution_months and average_monthly."""

    def test_streak_across_year_boundary(self):
        months = {(2024, 11), (2024, 12), (2025, 1), (2025, 2)}

        assert savings_streak(months, 2, 2025) == 4

    def test_streak_stops_at_gap(self):
        months = {(2024, 10), (2024, 12), (2025, 1)}

        assert savings_streak(months, 1, 2025) == 2

    def test_streak_zero_without_current_month(self):
        months = {(2025, 1), (2025, 2)}

        assert savings_streak(months, 3, 2025) == 0

    def test_contribution_months(self):
        entries = [
            make_entry(10, date(2025, 1, 3)),
            make_entry(20, date(2025, 1, 28)),
            make_entry(30, date(2024, 12, 31)),
        ]

        assert contribution_months(entries) == {(2025, 1), (2024, 12)}

    def test_average_monthly_ignores_empty_months(self):
        entries = [
            make_entry(100, date(2025, 1, 3)),
            make_entry(50, date(2025, 1, 20)),
            make_entry(150, date(2025, 3, 5)),
        ]

        assert average_monthly(entries) == Decimal("150")

    def test_average_monthly_without_entries(self):
        assert average_monthly([]) == Decimal("0")


class TestClampPct:
    def test_clamps_both_ends(self):
        assert clamp_pct(Decimal("-5")) == 0.0
        assert clamp_pct(Decimal("250")) == 100.0
        assert clamp_pct(Decimal("42.5")) == 42.5
