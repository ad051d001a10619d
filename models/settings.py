"""Per-owner settings captured at onboarding."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class UserSettings:
    owner_id: str
    monthly_income: Decimal
    onboarding_completed: bool = False
