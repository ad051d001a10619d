"""Goal service: at most one all-time goal per category."""

from decimal import Decimal
from typing import List, Optional

from db.manager import atomic
from errors import NotFoundError, ValidationError
from logger import get_logger
from models.goal import Goal
from services.validation import parse_amount

logger = get_logger()

_GOAL_SELECT_FIELDS = "id, owner_id, category_id, name, target_amount"


class GoalService:
    """Service for managing category goals."""

    def __init__(self, db_manager, owner_id: str):
        self.db_manager = db_manager
        self.owner_id = owner_id

    def find_all(self) -> List[Goal]:
        """Get all of the owner's goals."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_GOAL_SELECT_FIELDS} FROM category_goals WHERE owner_id = ? ORDER BY id",
                (self.owner_id,),
            )
            return [self._row_to_goal(row) for row in cursor.fetchall()]

    def find(self, category_id: int) -> Optional[Goal]:
        """Get the goal for a category, or None if it has none."""
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"""
                SELECT {_GOAL_SELECT_FIELDS}
                FROM category_goals
                WHERE category_id = ? AND owner_id = ?
                """,
                (category_id, self.owner_id),
            ).fetchone()

            if row:
                return self._row_to_goal(row)
            return None

    def upsert(self, category_id: int, name: str, target_amount) -> Goal:
        """Create the goal for a category, replacing any existing one.

        Args:
            category_id: Category the goal belongs to.
            name: Goal name.
            target_amount: Positive target.

        Returns:
            The stored Goal.

        Raises:
            ValidationError: If the name is empty or the target is not positive.
            NotFoundError: If the category is missing or foreign.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Goal name cannot be empty")
        target_amount = parse_amount(target_amount, "target_amount")

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
                    INSERT INTO category_goals (owner_id, category_id, name, target_amount)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT (category_id) DO UPDATE SET
                        name = excluded.name,
                        target_amount = excluded.target_amount
                    """,
                    (self.owner_id, category_id, name, str(target_amount)),
                )

        logger.info(f"Set goal '{name}' of {target_amount} for category {category_id}")
        return self.find(category_id)

    def delete(self, category_id: int) -> None:
        """Delete the goal for a category.

        Raises:
            NotFoundError: If the category has no goal owned by this owner.
        """
        with self.db_manager.connect() as conn:
            with atomic(conn):
                cursor = conn.execute(
                    "DELETE FROM category_goals WHERE category_id = ? AND owner_id = ?",
                    (category_id, self.owner_id),
                )

            if cursor.rowcount == 0:
                raise NotFoundError("Goal for category", category_id)

    def _row_to_goal(self, row: tuple) -> Goal:
        return Goal(
            id=row[0],
            owner_id=row[1],
            category_id=row[2],
            name=row[3],
            target_amount=Decimal(row[4]),
        )
