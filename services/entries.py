"""Entry service: the ledger of dated amounts logged against categories."""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from db.manager import atomic
from errors import NotFoundError, ValidationError
from logger import get_logger
from models.entry import Entry
from services.validation import parse_amount, parse_date, validate_month_year

logger = get_logger()

_ENTRY_SELECT_FIELDS = "id, owner_id, category_id, amount, entry_date, description, created_at"

# Newest date first; same-day entries newest-created first
_ENTRY_ORDER = "ORDER BY entry_date DESC, created_at DESC, id DESC"

_UNSET = object()


def _clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    description = description.strip()
    if len(description) > 255:
        raise ValidationError("Description cannot be longer than 255 characters")
    return description or None


class EntryService:
    """Service for managing entries."""

    def __init__(self, db_manager, owner_id: str):
        """Initialize the entry service.

        Args:
            db_manager: Database manager instance for database operations.
            owner_id: Owner whose entries this service reads and writes.
        """
        self.db_manager = db_manager
        self.owner_id = owner_id

    def create(
        self,
        category_id: int,
        amount,
        entry_date,
        description: Optional[str] = None,
    ) -> Entry:
        """Log a new entry against a category.

        The entry's month and year are taken from entry_date.

        Args:
            category_id: Category the entry belongs to.
            amount: Positive amount (Decimal, int, float or numeric string).
            entry_date: date or ISO string (YYYY-MM-DD).
            description: Optional free text.

        Returns:
            The created Entry.

        Raises:
            ValidationError: If the amount is not positive or the date is invalid.
            NotFoundError: If the category is missing or foreign.
        """
        amount = parse_amount(amount)
        entry_date = parse_date(entry_date)
        description = _clean_description(description)

        with self.db_manager.connect() as conn:
            self._require_category(conn, category_id)
            with atomic(conn):
                cursor = conn.execute(
                    """
                    INSERT INTO entries
                        (owner_id, category_id, amount, description, entry_date, month, year)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        self.owner_id,
                        category_id,
                        str(amount),
                        description,
                        entry_date.isoformat(),
                        entry_date.month,
                        entry_date.year,
                    ),
                )
            entry_id = cursor.lastrowid

        logger.info(f"Logged {amount} on {entry_date.isoformat()} to category {category_id}")
        return self.get(entry_id)

    def update(
        self,
        entry_id: int,
        amount=None,
        entry_date=None,
        description=_UNSET,
    ) -> Entry:
        """Update an entry, re-deriving its month and year if the date changes.

        Args:
            entry_id: The entry to update.
            amount: New positive amount, or None to keep.
            entry_date: New date, or None to keep.
            description: New description; None clears it, omit to keep.

        Returns:
            The updated Entry.

        Raises:
            ValidationError: If the new amount or date is invalid.
            NotFoundError: If the entry is missing or foreign.
        """
        updates = {}
        if amount is not None:
            updates["amount"] = str(parse_amount(amount))
        if entry_date is not None:
            parsed = parse_date(entry_date)
            updates["entry_date"] = parsed.isoformat()
            updates["month"] = parsed.month
            updates["year"] = parsed.year
        if description is not _UNSET:
            updates["description"] = _clean_description(description)

        if not updates:
            return self.get(entry_id)

        set_clause = ", ".join(f"{field} = ?" for field in updates)

        with self.db_manager.connect() as conn:
            with atomic(conn):
                cursor = conn.execute(
                    f"UPDATE entries SET {set_clause} WHERE id = ? AND owner_id = ?",
                    (*updates.values(), entry_id, self.owner_id),
                )

            if cursor.rowcount == 0:
                raise NotFoundError("Entry", entry_id)

        return self.get(entry_id)

    def delete(self, entry_id: int) -> None:
        """Delete an entry.

        Raises:
            NotFoundError: If the entry is missing or foreign.
        """
        with self.db_manager.connect() as conn:
            with atomic(conn):
                cursor = conn.execute(
                    "DELETE FROM entries WHERE id = ? AND owner_id = ?",
                    (entry_id, self.owner_id),
                )

            if cursor.rowcount == 0:
                raise NotFoundError("Entry", entry_id)

        logger.info(f"Deleted entry {entry_id}")

    def find(self, entry_id: int) -> Optional[Entry]:
        """Get a single entry by ID, or None if missing or foreign."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_ENTRY_SELECT_FIELDS} FROM entries WHERE id = ? AND owner_id = ?",
                (entry_id, self.owner_id),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_entry(row)
            return None

    def get(self, entry_id: int) -> Entry:
        entry = self.find(entry_id)
        if entry is None:
            raise NotFoundError("Entry", entry_id)
        return entry

    def list_for_category(
        self,
        category_id: int,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[Entry]:
        """Get entries for a category, optionally limited to one month.

        Args:
            category_id: Category to list.
            month: Month (1-12); must be given together with year.
            year: Year; must be given together with month.

        Returns:
            List of Entry objects, newest first.
        """
        query = f"""
            SELECT {_ENTRY_SELECT_FIELDS}
            FROM entries
            WHERE owner_id = ? AND category_id = ?
        """
        params = [self.owner_id, category_id]

        if month is not None or year is not None:
            if month is None or year is None:
                raise ValidationError("month and year must be given together")
            validate_month_year(month, year)
            query += " AND month = ? AND year = ?"
            params.extend([month, year])

        query += f" {_ENTRY_ORDER}"

        with self.db_manager.connect() as conn:
            cursor = conn.execute(query, params)
            return [self._row_to_entry(row) for row in cursor.fetchall()]

    def list_for_categories(self, category_ids: Iterable[int]) -> List[Entry]:
        """Get all entries for several categories at once.

        Args:
            category_ids: Categories to include.

        Returns:
            List of Entry objects, newest first. Empty without querying when
            no IDs are given.
        """
        category_ids = list(dict.fromkeys(category_ids))
        if not category_ids:
            return []

        placeholders = ", ".join(["?"] * len(category_ids))

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_ENTRY_SELECT_FIELDS}
                FROM entries
                WHERE owner_id = ? AND category_id IN ({placeholders})
                {_ENTRY_ORDER}
                """,
                (self.owner_id, *category_ids),
            )
            return [self._row_to_entry(row) for row in cursor.fetchall()]

    def _require_category(self, conn, category_id: int) -> None:
        row = conn.execute(
            "SELECT 1 FROM categories WHERE id = ? AND owner_id = ?",
            (category_id, self.owner_id),
        ).fetchone()
        if row is None:
            raise NotFoundError("Category", category_id)

    def _row_to_entry(self, row: tuple) -> Entry:
        """Convert a database row to an Entry object."""
        return Entry(
            id=row[0],
            owner_id=row[1],
            category_id=row[2],
            amount=Decimal(row[3]),
            entry_date=date.fromisoformat(row[4]),
            description=row[5],
            created_at=datetime.fromisoformat(row[6]) if row[6] else None,
        )
