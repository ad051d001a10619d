"""Goal model: an all-time cumulative target for a category."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class Goal:
    id: int
    owner_id: str
    category_id: int  # at most one goal per category
    name: str
    target_amount: Decimal
