"""Credit card tracker service: at most one sign-up bonus tracker per category."""

from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from db.manager import atomic
from errors import NotFoundError, ValidationError
from logger import get_logger
from models.credit_card_tracker import CreditCardTracker
from services.validation import parse_amount, parse_date

logger = get_logger()

DEFAULT_WINDOW_DAYS = 90

_TRACKER_SELECT_FIELDS = """id, owner_id, category_id, card_name, spend_target, bonus_points,
       start_date, end_date, paid_in_full"""


def resolve_end_date(start_date: date, end_date: Optional[date] = None) -> date:
    """Get the last day of a tracker's spend window.

    Args:
        start_date: First day of the window.
        end_date: Explicit last day, if the user gave one.

    Returns:
        end_date when given, otherwise start_date plus 90 days.

    Raises:
        ValidationError: If end_date is before start_date.
    """
    if end_date is None:
        return start_date + timedelta(days=DEFAULT_WINDOW_DAYS)
    if end_date < start_date:
        raise ValidationError(
            f"end_date {end_date.isoformat()} is before start_date {start_date.isoformat()}"
        )
    return end_date


def _validate_bonus_points(bonus_points) -> int:
    if not isinstance(bonus_points, int) or isinstance(bonus_points, bool) or bonus_points < 0:
        raise ValidationError(f"bonus_points must be a whole number of 0 or more, got {bonus_points!r}")
    return bonus_points


class CreditCardService:
    """Service for managing credit card bonus trackers."""

    def __init__(self, db_manager, owner_id: str):
        self.db_manager = db_manager
        self.owner_id = owner_id

    def find_all(self) -> List[CreditCardTracker]:
        """Get all of the owner's trackers, newest first."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRACKER_SELECT_FIELDS}
                FROM credit_card_trackers
                WHERE owner_id = ?
                ORDER BY created_at DESC, id DESC
                """,
                (self.owner_id,),
            )
            return [self._row_to_tracker(row) for row in cursor.fetchall()]

    def find(self, category_id: int) -> Optional[CreditCardTracker]:
        """Get the tracker for a category, or None if it has none."""
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"""
                SELECT {_TRACKER_SELECT_FIELDS}
                FROM credit_card_trackers
                WHERE category_id = ? AND owner_id = ?
                """,
                (category_id, self.owner_id),
            ).fetchone()

            if row:
                return self._row_to_tracker(row)
            return None

    def find_by_id(self, tracker_id: int) -> Optional[CreditCardTracker]:
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"""
                SELECT {_TRACKER_SELECT_FIELDS}
                FROM credit_card_trackers
                WHERE id = ? AND owner_id = ?
                """,
                (tracker_id, self.owner_id),
            ).fetchone()

            if row:
                return self._row_to_tracker(row)
            return None

    def upsert(
        self,
        category_id: int,
        card_name: str,
        spend_target,
        start_date,
        bonus_points: int = 0,
        end_date=None,
    ) -> CreditCardTracker:
        """Create the tracker for a category, replacing any existing one.

        The paid-in-full flag of an existing tracker is kept.

        Args:
            category_id: Category whose entries count as card spend.
            card_name: Name of the card.
            spend_target: Positive spend required for the bonus.
            start_date: First day of the window (date or ISO string).
            bonus_points: Bonus points (0 or more).
            end_date: Last day of the window; defaults to start_date + 90 days.

        Returns:
            The stored CreditCardTracker.

        Raises:
            ValidationError: If any field is invalid.
            NotFoundError: If the category is missing or foreign.
        """
        card_name = (card_name or "").strip()
        if not card_name:
            raise ValidationError("Card name cannot be empty")
        spend_target = parse_amount(spend_target, "spend_target")
        bonus_points = _validate_bonus_points(bonus_points)
        start_date = parse_date(start_date, "start_date")
        end_date = resolve_end_date(
            start_date, parse_date(end_date, "end_date") if end_date is not None else None
        )

        with self.db_manager.connect() as conn:
            owned = conn.execute(
                "SELECT 1 FROM categories WHERE id = ? AND owner_id = ?",
                (category_id, self.owner_id),
            ).fetchone()
            if owned is None:
                raise NotFoundError("Category", category_id)

            with atomic(conn):
                conn.execute(
                    """
                    INSERT INTO credit_card_trackers
                        (owner_id, category_id, card_name, spend_target, bonus_points,
                         start_date, end_date)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT (category_id) DO UPDATE SET
                        card_name = excluded.card_name,
                        spend_target = excluded.spend_target,
                        bonus_points = excluded.bonus_points,
                        start_date = excluded.start_date,
                        end_date = excluded.end_date
                    """,
                    (
                        self.owner_id,
                        category_id,
                        card_name,
                        str(spend_target),
                        bonus_points,
                        start_date.isoformat(),
                        end_date.isoformat(),
                    ),
                )

        logger.info(
            f"Tracking {card_name} for category {category_id}: "
            f"{spend_target} by {end_date.isoformat()}"
        )
        return self.find(category_id)

    def update(
        self,
        tracker_id: int,
        paid_in_full: Optional[bool] = None,
        bonus_points: Optional[int] = None,
        end_date=None,
    ) -> CreditCardTracker:
        """Update the mutable fields of a tracker.

        Raises:
            ValidationError: If bonus_points or end_date is invalid.
            NotFoundError: If the tracker is missing or foreign.
        """
        tracker = self.find_by_id(tracker_id)
        if tracker is None:
            raise NotFoundError("Credit card tracker", tracker_id)

        updates = {}
        if paid_in_full is not None:
            updates["paid_in_full"] = int(bool(paid_in_full))
        if bonus_points is not None:
            updates["bonus_points"] = _validate_bonus_points(bonus_points)
        if end_date is not None:
            updates["end_date"] = resolve_end_date(
                tracker.start_date, parse_date(end_date, "end_date")
            ).isoformat()

        if not updates:
            return tracker

        set_clause = ", ".join(f"{field} = ?" for field in updates)

        with self.db_manager.connect() as conn:
            with atomic(conn):
                conn.execute(
                    f"UPDATE credit_card_trackers SET {set_clause} WHERE id = ? AND owner_id = ?",
                    (*updates.values(), tracker_id, self.owner_id),
                )

        return self.find_by_id(tracker_id)

    def delete(self, tracker_id: int) -> None:
        """Delete a tracker.

        Raises:
            NotFoundError: If the tracker is missing or foreign.
        """
        with self.db_manager.connect() as conn:
            with atomic(conn):
                cursor = conn.execute(
                    "DELETE FROM credit_card_trackers WHERE id = ? AND owner_id = ?",
                    (tracker_id, self.owner_id),
                )

            if cursor.rowcount == 0:
                raise NotFoundError("Credit card tracker", tracker_id)

    def _row_to_tracker(self, row: tuple) -> CreditCardTracker:
        """Convert a database row to a CreditCardTracker object."""
        return CreditCardTracker(
            id=row[0],
            owner_id=row[1],
            category_id=row[2],
            card_name=row[3],
            spend_target=Decimal(row[4]),
            bonus_points=row[5],
            start_date=date.fromisoformat(row[6]),
            end_date=date.fromisoformat(row[7]),
            paid_in_full=bool(row[8]),
        )
