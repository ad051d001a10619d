"""Budget period model: one per owner, month and year."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass
class Allocation:
    """A category's percentage share of a budget period's income."""

    category_id: int
    allocation_pct: int


@dataclass
class Budget:
    """Represents the income and allocation split for one month.

    Attributes:
        id: Unique identifier (auto-generated).
        owner_id: Owner of the budget.
        month: Calendar month (1-12).
        year: Calendar year.
        income: Monthly income.
        allocations: Category allocations for this period.
    """

    id: int
    owner_id: str
    month: int
    year: int
    income: Decimal
    allocations: List[Allocation] = field(default_factory=list)

    @property
    def total_pct(self) -> int:
        """Sum of allocation percentages across all categories."""
        return sum(a.allocation_pct for a in self.allocations)

    def allocation_for(self, category_id: int) -> Optional[Allocation]:
        """Get the allocation for a category, if it has one."""
        for allocation in self.allocations:
            if allocation.category_id == category_id:
                return allocation
        return None
