"""Onboarding service: the one-time setup of settings, categories and the first budget."""

import sqlite3
from dataclasses import dataclass
from typing import List, Optional

from db.manager import atomic
from errors import ConflictError, ValidationError
from logger import get_logger
from models.budget import Budget
from models.category import Category
from services.categories import parse_category_type, validate_category_name
from services.validation import parse_amount, validate_month_year, validate_pct

logger = get_logger()


@dataclass
class CategoryDefinition:
    """A category to create during onboarding, with its share of income."""

    name: str
    type: str
    allocation_pct: int
    emoji: Optional[str] = None
    color: Optional[str] = None


@dataclass
class OnboardingResult:
    budget: Budget
    categories: List[Category]


class OnboardingService:
    """Service that performs onboarding as a single transaction."""

    def __init__(self, db_manager, owner_id: str, settings, categories, budgets):
        """Initialize the onboarding service.

        Args:
            db_manager: Database manager instance for database operations.
            owner_id: Owner being onboarded.
            settings: SettingsService for the owner.
            categories: CategoryService for the owner.
            budgets: BudgetService for the owner.
        """
        self.db_manager = db_manager
        self.owner_id = owner_id
        self.settings = settings
        self.categories = categories
        self.budgets = budgets

    def complete(
        self,
        income,
        month: int,
        year: int,
        definitions: List[CategoryDefinition],
    ) -> OnboardingResult:
        """Onboard the owner.

        Writes the settings, every category, the first budget period and one
        allocation per category. Either all of it is stored or none of it is.

        Args:
            income: Positive monthly income.
            month: Month of the first budget (1-12).
            year: Year of the first budget.
            definitions: Categories to create, in display order.

        Returns:
            OnboardingResult with the created budget and categories.

        Raises:
            ValidationError: If the percentages do not add up to exactly 100,
                             or any other input is invalid. Nothing is written.
            ConflictError: If a category name or the budget period already
                           exists. Nothing is written.
        """
        income = parse_amount(income, "income")
        validate_month_year(month, year)
        if not definitions:
            raise ValidationError("At least one category is required")

        rows = []
        seen_names = set()
        for definition in definitions:
            name = validate_category_name(definition.name)
            if name in seen_names:
                raise ValidationError(f"Category '{name}' is listed more than once")
            seen_names.add(name)
            rows.append(
                (
                    name,
                    parse_category_type(definition.type),
                    validate_pct(definition.allocation_pct),
                    definition.emoji,
                    definition.color,
                )
            )

        total_pct = sum(row[2] for row in rows)
        if total_pct != 100:
            raise ValidationError(
                f"Allocation percentages must add up to 100%, got {total_pct}%"
            )

        with self.db_manager.connect() as conn:
            try:
                with atomic(conn):
                    self.settings.upsert_with(conn, income, True)

                    category_ids = []
                    for sort_order, (name, category_type, _, emoji, color) in enumerate(rows):
                        cursor = conn.execute(
                            """
                            INSERT INTO categories
                                (owner_id, name, type, sort_order, emoji, color)
                            VALUES (?, ?, ?, ?, ?, ?)
                            """,
                            (self.owner_id, name, category_type.value, sort_order, emoji, color),
                        )
                        category_ids.append(cursor.lastrowid)

                    cursor = conn.execute(
                        "INSERT INTO budgets (owner_id, month, year, income) VALUES (?, ?, ?, ?)",
                        (self.owner_id, month, year, str(income)),
                    )
                    budget_id = cursor.lastrowid

                    conn.executemany(
                        """
                        INSERT INTO budget_allocations (budget_id, category_id, allocation_pct)
                        VALUES (?, ?, ?)
                        """,
                        [
                            (budget_id, category_id, row[2])
                            for category_id, row in zip(category_ids, rows)
                        ],
                    )
            except sqlite3.IntegrityError as e:
                logger.warning(f"Onboarding rolled back: {e}")
                raise ConflictError(f"Onboarding conflicts with existing data: {e}")

        logger.info(
            f"Onboarded owner {self.owner_id}: {len(category_ids)} categories, "
            f"budget {year}-{month:02d} with income {income}"
        )

        return OnboardingResult(
            budget=self.budgets.find(month, year),
            categories=[self.categories.get(category_id) for category_id in category_ids],
        )
