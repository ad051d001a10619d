"""Budget service: one budget period per owner, month and year.

A period moves through three states: absent, bootstrapped (created on first
access, seeded from the previous period) and edited (income or allocations
changed by the owner).
"""

import sqlite3
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple, Union

from db.manager import atomic
from errors import ConflictError, NotFoundError
from logger import get_logger
from models.budget import Allocation, Budget
from services.validation import parse_amount, validate_month_year, validate_pct

logger = get_logger()

_BUDGET_SELECT_FIELDS = "id, owner_id, month, year, income"

AllocationLike = Union[Allocation, Tuple[int, int]]


def _as_allocation(item: AllocationLike) -> Allocation:
    if isinstance(item, Allocation):
        category_id, pct = item.category_id, item.allocation_pct
    else:
        category_id, pct = item
    return Allocation(category_id=category_id, allocation_pct=validate_pct(pct))


class BudgetService:
    """Service for managing budget periods and their allocations."""

    def __init__(self, db_manager, owner_id: str, settings, categories):
        """Initialize the budget service.

        Args:
            db_manager: Database manager instance for database operations.
            owner_id: Owner whose budgets this service reads and writes.
            settings: SettingsService used to seed the very first period.
            categories: CategoryService used to filter allocations to owned categories.
        """
        self.db_manager = db_manager
        self.owner_id = owner_id
        self.settings = settings
        self.categories = categories

    def find(self, month: int, year: int) -> Optional[Budget]:
        """Get the budget for a month with its allocations, or None if absent."""
        validate_month_year(month, year)
        with self.db_manager.connect() as conn:
            return self._find_with(conn, month, year)

    def get_or_create(self, month: int, year: int) -> Budget:
        """Get the budget for a month, creating it on first access.

        A new period copies the income and every allocation of the owner's
        most recent earlier period. Without an earlier period the income is
        seeded from settings (or 0) and there are no allocations.

        Calling this repeatedly for the same month returns the same period.
        If a concurrent caller inserts the period first, the unique
        (owner, month, year) constraint rejects this insert and the winner's
        row is returned instead.

        Args:
            month: Month (1-12).
            year: Year.

        Returns:
            The existing or newly created Budget.
        """
        existing = self.find(month, year)
        if existing:
            return existing

        with self.db_manager.connect() as conn:
            previous = self._find_previous_with(conn, month, year)
            if previous:
                income = previous.income
                allocations = previous.allocations
                source = f"{previous.year}-{previous.month:02d}"
            else:
                settings = self.settings.find_with(conn)
                income = settings.monthly_income if settings else Decimal("0")
                allocations = []
                source = "settings" if settings else "defaults"

            try:
                with atomic(conn):
                    cursor = conn.execute(
                        "INSERT INTO budgets (owner_id, month, year, income) VALUES (?, ?, ?, ?)",
                        (self.owner_id, month, year, str(income)),
                    )
                    budget_id = cursor.lastrowid
                    self._insert_allocations(conn, budget_id, allocations)
            except sqlite3.IntegrityError:
                logger.info(f"Budget {year}-{month:02d} was created concurrently, re-reading it")
                winner = self._find_with(conn, month, year)
                if winner is None:
                    raise ConflictError(f"Could not create budget for {year}-{month:02d}")
                return winner

            logger.info(
                f"Created budget {year}-{month:02d} (ID: {budget_id}) seeded from {source}"
            )
            return self._find_with(conn, month, year)

    def update_income(self, month: int, year: int, income) -> Budget:
        """Set the income of an existing period.

        Stored allocation percentages are unchanged, so every category's
        allocated amount scales with the new income.

        Raises:
            ValidationError: If income is not positive.
            NotFoundError: If the period has not been created yet.
        """
        validate_month_year(month, year)
        income = parse_amount(income, "income")

        with self.db_manager.connect() as conn:
            with atomic(conn):
                cursor = conn.execute(
                    "UPDATE budgets SET income = ? WHERE owner_id = ? AND month = ? AND year = ?",
                    (str(income), self.owner_id, month, year),
                )

            if cursor.rowcount == 0:
                raise NotFoundError("Budget", f"{year}-{month:02d}")

            return self._find_with(conn, month, year)

    def replace_allocations(
        self, month: int, year: int, allocations: Iterable[AllocationLike]
    ) -> Budget:
        """Replace a period's allocations with a new set.

        Categories left out of the new set lose their allocation. Allocations
        for categories the owner does not have are dropped without error.

        Args:
            month: Month (1-12).
            year: Year.
            allocations: Allocation objects or (category_id, allocation_pct) pairs.

        Returns:
            The updated Budget.

        Raises:
            ValidationError: If a percentage is not an integer in 0-100.
            NotFoundError: If the period has not been created yet.
        """
        validate_month_year(month, year)
        requested = [_as_allocation(item) for item in allocations]

        with self.db_manager.connect() as conn:
            budget = self._find_with(conn, month, year)
            if budget is None:
                raise NotFoundError("Budget", f"{year}-{month:02d}")

            owned = self.categories.owned_ids(conn)

            # Later duplicates of a category win
            accepted = {}
            for allocation in requested:
                if allocation.category_id in owned:
                    accepted[allocation.category_id] = allocation
                else:
                    logger.debug(
                        f"Dropping allocation for unknown category {allocation.category_id}"
                    )

            with atomic(conn):
                conn.execute(
                    "DELETE FROM budget_allocations WHERE budget_id = ?", (budget.id,)
                )
                self._insert_allocations(conn, budget.id, list(accepted.values()))

            updated = self._find_with(conn, month, year)

        if updated.total_pct != 100:
            logger.warning(
                f"Allocations for {year}-{month:02d} add up to {updated.total_pct}%, not 100%"
            )
        return updated

    def list_periods(self) -> List[Budget]:
        """Get all of the owner's budget periods, newest first."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_BUDGET_SELECT_FIELDS}
                FROM budgets
                WHERE owner_id = ?
                ORDER BY year DESC, month DESC
                """,
                (self.owner_id,),
            )
            return [self._row_to_budget(conn, row) for row in cursor.fetchall()]

    def _find_with(self, conn, month: int, year: int) -> Optional[Budget]:
        row = conn.execute(
            f"""
            SELECT {_BUDGET_SELECT_FIELDS}
            FROM budgets
            WHERE owner_id = ? AND month = ? AND year = ?
            """,
            (self.owner_id, month, year),
        ).fetchone()

        if row:
            return self._row_to_budget(conn, row)
        return None

    def _find_previous_with(self, conn, month: int, year: int) -> Optional[Budget]:
        """Get the most recent period strictly before the given month."""
        row = conn.execute(
            f"""
            SELECT {_BUDGET_SELECT_FIELDS}
            FROM budgets
            WHERE owner_id = ? AND (year < ? OR (year = ? AND month < ?))
            ORDER BY year DESC, month DESC
            LIMIT 1
            """,
            (self.owner_id, year, year, month),
        ).fetchone()

        if row:
            return self._row_to_budget(conn, row)
        return None

    def _insert_allocations(self, conn, budget_id: int, allocations: List[Allocation]) -> None:
        if not allocations:
            return
        conn.executemany(
            """
            INSERT INTO budget_allocations (budget_id, category_id, allocation_pct)
            VALUES (?, ?, ?)
            """,
            [(budget_id, a.category_id, a.allocation_pct) for a in allocations],
        )

    def _row_to_budget(self, conn, row: tuple) -> Budget:
        """Convert a database row to a Budget object, loading its allocations."""
        cursor = conn.execute(
            """
            SELECT a.category_id, a.allocation_pct
            FROM budget_allocations a
            JOIN categories c ON c.id = a.category_id
            WHERE a.budget_id = ?
            ORDER BY c.sort_order, c.id
            """,
            (row[0],),
        )
        return Budget(
            id=row[0],
            owner_id=row[1],
            month=row[2],
            year=row[3],
            income=Decimal(row[4]),
            allocations=[
                Allocation(category_id=r[0], allocation_pct=r[1]) for r in cursor.fetchall()
            ],
        )
