"""Credit card sign-up bonus tracker model."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass
class CreditCardTracker:
    """Tracks spend toward a credit card sign-up bonus.

    Attributes:
        id: Unique identifier (auto-generated).
        owner_id: Owner of the tracker.
        category_id: Category whose entries count as card spend (one tracker per category).
        card_name: Name of the card.
        spend_target: Spend required within the window to earn the bonus.
        bonus_points: Points awarded when the target is met.
        start_date: First day of the spend window.
        end_date: Last day of the spend window (inclusive).
        paid_in_full: Whether this billing month's statement was paid off.
    """

    id: int
    owner_id: str
    category_id: int
    card_name: str
    spend_target: Decimal
    bonus_points: int
    start_date: date
    end_date: date
    paid_in_full: bool = False
