"""Dashboard aggregation tools.

Loads a month's budget, categories, entries, goals and trackers through the
services and runs them through the progress derivations, producing one
summary per category.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from models.budget import Budget
from models.category import Category, CategoryType
from models.entry import Entry
from tools.credit_cards import CreditCardProgress, credit_card_progress
from tools.progress import (
    BudgetBreakdown,
    ContributionProgress,
    GoalProgress,
    SpendingProgress,
    allocated_amount,
    average_monthly,
    budget_breakdown,
    contribution_months,
    contribution_progress,
    entries_for_month,
    goal_progress,
    savings_streak,
    spending_progress,
    total_amount,
)


@dataclass
class CategorySummary:
    """Everything derived for one category in one month.

    Only the progress fields that apply to the category's type are set:
    spending for spending categories, contribution for saving, investment
    and custom categories, and both spending and credit_card for credit card
    categories. goal and streak are set whenever the category has a goal.
    """

    category: Category
    allocation_pct: int
    allocated: Decimal
    month_total: Decimal
    all_time_total: Decimal
    average_monthly: Decimal
    spending: Optional[SpendingProgress] = None
    contribution: Optional[ContributionProgress] = None
    credit_card: Optional[CreditCardProgress] = None
    goal: Optional[GoalProgress] = None
    streak: Optional[int] = None


@dataclass
class MonthOverview:
    month: int
    year: int
    budget: Budget
    breakdown: BudgetBreakdown
    categories: List[CategorySummary] = field(default_factory=list)


def summarize_category(
    category: Category,
    budget: Budget,
    entries: List[Entry],
    today: date,
    goal=None,
    tracker=None,
) -> CategorySummary:
    """Derive the summary of one category from already-loaded data.

    Args:
        category: The category.
        budget: The month's budget period.
        entries: All of the category's entries, any month.
        today: Reference date for pacing.
        goal: The category's Goal, if any.
        tracker: The category's CreditCardTracker, if any.

    Returns:
        CategorySummary for the budget's month.
    """
    month, year = budget.month, budget.year
    allocation = budget.allocation_for(category.id)
    allocation_pct = allocation.allocation_pct if allocation else 0
    allocated = allocated_amount(budget.income, allocation_pct)

    month_total = total_amount(entries_for_month(entries, month, year))
    all_time_total = total_amount(entries)
    average = average_monthly(entries)

    summary = CategorySummary(
        category=category,
        allocation_pct=allocation_pct,
        allocated=allocated,
        month_total=month_total,
        all_time_total=all_time_total,
        average_monthly=average,
    )

    if category.type in (CategoryType.SPENDING, CategoryType.CREDIT_CARD):
        summary.spending = spending_progress(month_total, allocated, today, month, year)
    else:
        summary.contribution = contribution_progress(month_total, allocated, today, month, year)

    if category.type == CategoryType.CREDIT_CARD and tracker is not None:
        summary.credit_card = credit_card_progress(tracker, entries, today)

    if goal is not None:
        summary.goal = goal_progress(goal.target_amount, all_time_total, allocated, average)
        summary.streak = savings_streak(contribution_months(entries), month, year)

    return summary


def get_month_overview(services, month: int, year: int, today: date) -> MonthOverview:
    """Build the dashboard for a month.

    Viewing a month creates its budget period if it does not exist yet.

    Args:
        services: Services container.
        month: Month (1-12).
        year: Year.
        today: Reference date for pacing.

    Returns:
        MonthOverview with one CategorySummary per category, in display order.
    """
    budget = services.budgets.get_or_create(month, year)
    categories = services.categories.find_all()

    entries_by_category: Dict[int, List[Entry]] = {c.id: [] for c in categories}
    for entry in services.entries.list_for_categories(entries_by_category.keys()):
        entries_by_category[entry.category_id].append(entry)

    goals = {g.category_id: g for g in services.goals.find_all()}
    trackers = {t.category_id: t for t in services.credit_cards.find_all()}

    return MonthOverview(
        month=month,
        year=year,
        budget=budget,
        breakdown=budget_breakdown(budget),
        categories=[
            summarize_category(
                category,
                budget,
                entries_by_category[category.id],
                today,
                goal=goals.get(category.id),
                tracker=trackers.get(category.id),
            )
            for category in categories
        ],
    )
