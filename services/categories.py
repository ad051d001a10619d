"""Category service for database operations."""

import sqlite3
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from db.manager import atomic
from errors import ConflictError, NotFoundError, ValidationError
from logger import get_logger
from models.category import Category, CategoryType

logger = get_logger()

_CATEGORY_SELECT_FIELDS = "id, owner_id, name, type, sort_order, emoji, color, created_at"

_UNSET = object()


def parse_category_type(value) -> CategoryType:
    """Parse a category type from its string value.

    Raises:
        ValidationError: If the value is not a known category type.
    """
    try:
        return CategoryType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in CategoryType)
        raise ValidationError(f"Unknown category type '{value}' (expected one of: {allowed})")


def validate_category_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name cannot be empty")
    if len(name) > 255:
        raise ValidationError("Category name cannot be longer than 255 characters")
    return name


class CategoryService:
    """Service for managing an owner's categories."""

    def __init__(self, db_manager, owner_id: str):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
            owner_id: Owner whose categories this service reads and writes.
        """
        self.db_manager = db_manager
        self.owner_id = owner_id

    def find_all(self) -> List[Category]:
        """Get all of the owner's categories.

        Returns:
            List of Category objects, ordered by sort_order then creation.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CATEGORY_SELECT_FIELDS}
                FROM categories
                WHERE owner_id = ?
                ORDER BY sort_order, created_at, id
                """,
                (self.owner_id,),
            )
            return [self._row_to_category(row) for row in cursor.fetchall()]

    def find(self, category_id: int) -> Optional[Category]:
        """Get a single category by ID.

        Args:
            category_id: The category ID to find.

        Returns:
            Category object if found and owned by this owner, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories WHERE id = ? AND owner_id = ?",
                (category_id, self.owner_id),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def find_by_name(self, name: str) -> Optional[Category]:
        """Get a single category by name (case-sensitive)."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories WHERE name = ? AND owner_id = ?",
                (name, self.owner_id),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def get(self, category_id: int) -> Category:
        """Get a category by ID, raising NotFoundError if it is missing or foreign."""
        category = self.find(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    def create(
        self,
        name: str,
        category_type=CategoryType.SPENDING,
        emoji: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Category:
        """Create a new category at the end of the owner's list.

        Args:
            name: Category name (unique per owner).
            category_type: CategoryType or its string value.
            emoji: Optional emoji.
            color: Optional display color.

        Returns:
            The created Category object with id populated.

        Raises:
            ValidationError: If the name is empty or the type is unknown.
            ConflictError: If the owner already has a category with this name.
        """
        name = validate_category_name(name)
        category_type = parse_category_type(category_type)

        with self.db_manager.connect() as conn:
            sort_order = conn.execute(
                "SELECT COUNT(*) FROM categories WHERE owner_id = ?",
                (self.owner_id,),
            ).fetchone()[0]
            try:
                with atomic(conn):
                    cursor = conn.execute(
                        """
                        INSERT INTO categories (owner_id, name, type, sort_order, emoji, color)
                        VALUES (?, ?, ?, ?, ?, ?)
                        """,
                        (self.owner_id, name, category_type.value, sort_order, emoji, color),
                    )
            except sqlite3.IntegrityError:
                raise ConflictError(f"Category '{name}' already exists")

            category_id = cursor.lastrowid

        logger.info(f"Created category '{name}' ({category_type.value}, ID: {category_id})")
        return self.get(category_id)

    def update(
        self,
        category_id: int,
        name: Optional[str] = None,
        category_type=None,
        emoji=_UNSET,
        color=_UNSET,
        sort_order: Optional[int] = None,
    ) -> Category:
        """Update an existing category.

        Only the fields that are passed are changed. Passing emoji=None or
        color=None clears that field.

        Returns:
            The updated Category object.

        Raises:
            NotFoundError: If the category is missing or foreign.
            ValidationError: If the new name or type is invalid.
            ConflictError: If the new name is already taken.
        """
        updates = {}
        if name is not None:
            updates["name"] = validate_category_name(name)
        if category_type is not None:
            updates["type"] = parse_category_type(category_type).value
        if emoji is not _UNSET:
            updates["emoji"] = emoji
        if color is not _UNSET:
            updates["color"] = color
        if sort_order is not None:
            updates["sort_order"] = sort_order

        if not updates:
            return self.get(category_id)

        set_clause = ", ".join(f"{field} = ?" for field in updates)

        with self.db_manager.connect() as conn:
            try:
                with atomic(conn):
                    cursor = conn.execute(
                        f"UPDATE categories SET {set_clause} WHERE id = ? AND owner_id = ?",
                        (*updates.values(), category_id, self.owner_id),
                    )
            except sqlite3.IntegrityError:
                raise ConflictError(f"Category '{updates.get('name')}' already exists")

            if cursor.rowcount == 0:
                raise NotFoundError("Category", category_id)

        return self.get(category_id)

    def reorder(self, items: Iterable[Tuple[int, int]]) -> int:
        """Set the sort order of several categories in one transaction.

        Args:
            items: Pairs of (category_id, sort_order). IDs that are not the
                   owner's are ignored.

        Returns:
            Number of categories updated.
        """
        items = list(items)
        if not items:
            return 0

        with self.db_manager.connect() as conn:
            with atomic(conn):
                updated = 0
                for category_id, sort_order in items:
                    cursor = conn.execute(
                        "UPDATE categories SET sort_order = ? WHERE id = ? AND owner_id = ?",
                        (sort_order, category_id, self.owner_id),
                    )
                    updated += cursor.rowcount

        return updated

    def delete(self, category_id: int) -> None:
        """Delete a category and everything that references it.

        Entries, the goal, the credit card tracker and all budget allocations
        for the category are removed with it. This cannot be undone.

        Raises:
            NotFoundError: If the category is missing or foreign.
        """
        with self.db_manager.connect() as conn:
            with atomic(conn):
                cursor = conn.execute(
                    "DELETE FROM categories WHERE id = ? AND owner_id = ?",
                    (category_id, self.owner_id),
                )

            if cursor.rowcount == 0:
                raise NotFoundError("Category", category_id)

        logger.info(f"Deleted category {category_id} and its entries, goal, tracker and allocations")

    def owned_ids(self, conn) -> set:
        """Get the IDs of all of the owner's categories using an open connection."""
        cursor = conn.execute(
            "SELECT id FROM categories WHERE owner_id = ?", (self.owner_id,)
        )
        return {row[0] for row in cursor.fetchall()}

    def _row_to_category(self, row: tuple) -> Category:
        """Convert a database row to a Category object."""
        return Category(
            id=row[0],
            owner_id=row[1],
            name=row[2],
            type=CategoryType(row[3]),
            sort_order=row[4],
            emoji=row[5],
            color=row[6],
            created_at=datetime.fromisoformat(row[7]) if row[7] else None,
        )
