"""Settings service for per-owner settings."""

from decimal import Decimal
from typing import Optional

from db.manager import atomic
from models.settings import UserSettings
from services.validation import parse_non_negative_amount


class SettingsService:
    """Service for reading and writing the owner's settings row."""

    def __init__(self, db_manager, owner_id: str):
        self.db_manager = db_manager
        self.owner_id = owner_id

    def find(self) -> Optional[UserSettings]:
        """Get the owner's settings, or None before onboarding."""
        with self.db_manager.connect() as conn:
            return self.find_with(conn)

    def find_with(self, conn) -> Optional[UserSettings]:
        """Get the owner's settings using an open connection."""
        row = conn.execute(
            """
            SELECT owner_id, monthly_income, onboarding_completed
            FROM user_settings
            WHERE owner_id = ?
            """,
            (self.owner_id,),
        ).fetchone()

        if row:
            return UserSettings(
                owner_id=row[0],
                monthly_income=Decimal(row[1]),
                onboarding_completed=bool(row[2]),
            )
        return None

    def upsert(self, monthly_income, onboarding_completed: bool = True) -> UserSettings:
        """Create or replace the owner's settings.

        Args:
            monthly_income: Income recorded at onboarding (zero or more).
            onboarding_completed: Whether onboarding has finished.

        Returns:
            The stored UserSettings.
        """
        monthly_income = parse_non_negative_amount(monthly_income, "monthly_income")
        with self.db_manager.connect() as conn:
            with atomic(conn):
                self.upsert_with(conn, monthly_income, onboarding_completed)
            return self.find_with(conn)

    def upsert_with(self, conn, monthly_income: Decimal, onboarding_completed: bool) -> None:
        """Write the settings row using an open connection (no commit)."""
        conn.execute(
            """
            INSERT INTO user_settings (owner_id, monthly_income, onboarding_completed)
            VALUES (?, ?, ?)
            ON CONFLICT (owner_id) DO UPDATE SET
                monthly_income = excluded.monthly_income,
                onboarding_completed = excluded.onboarding_completed
            """,
            (self.owner_id, str(monthly_income), int(onboarding_completed)),
        )
