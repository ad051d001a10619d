"""Category model for budget categories."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class CategoryType(str, Enum):
    """Kind of category, which decides how its progress is derived."""

    SPENDING = "spending"
    SAVING = "saving"
    INVESTMENT = "investment"
    CREDIT_CARD = "credit_card"
    CUSTOM = "custom"


@dataclass
class Category:
    """Represents a user-defined budget category.

    Attributes:
        id: Unique identifier (auto-generated).
        owner_id: Owner of the category.
        name: Category name (unique per owner).
        type: Category type.
        sort_order: Position in the owner's category list.
        emoji: Optional emoji shown next to the name.
        color: Optional display color.
        created_at: Timestamp when the category was created.
    """

    id: int
    owner_id: str
    name: str
    type: CategoryType
    sort_order: int = 0
    emoji: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[datetime] = None
