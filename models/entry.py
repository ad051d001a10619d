"""Entry model: a dated amount logged against a category."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Entry:
    id: int
    owner_id: str
    category_id: int
    amount: Decimal  # always positive
    entry_date: date
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    # month and year are derived from entry_date, never set independently
    @property
    def month(self) -> int:
        return self.entry_date.month

    @property
    def year(self) -> int:
        return self.entry_date.year
