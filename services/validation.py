"""Input parsing shared by the services.

Each helper returns the normalized value or raises ValidationError; none of
them default an invalid value.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Union

from errors import ValidationError

DateLike = Union[date, str]
AmountLike = Union[Decimal, int, float, str]


def parse_amount(value: AmountLike, field: str = "amount") -> Decimal:
    """Parse a strictly positive monetary amount.

    Floats are converted through their string form so that 12.34 stays
    Decimal("12.34") rather than its binary expansion.

    Raises:
        ValidationError: If the value is not a finite number greater than zero.
    """
    amount = _to_decimal(value, field)
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than 0, got {value}")
    return amount


def parse_non_negative_amount(value: AmountLike, field: str = "amount") -> Decimal:
    """Parse a monetary amount that may be zero."""
    amount = _to_decimal(value, field)
    if amount < 0:
        raise ValidationError(f"{field} must not be negative, got {value}")
    return amount


def _to_decimal(value: AmountLike, field: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number, got {value!r}")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number, got {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number, got {value!r}")
    return amount


def parse_date(value: DateLike, field: str = "date") -> date:
    """Parse a calendar date given as a date or an ISO string (YYYY-MM-DD).

    A datetime is rejected rather than truncated: dates carry no time of day.

    Raises:
        ValidationError: If the value is not a valid calendar date.
    """
    if isinstance(value, datetime):
        raise ValidationError(f"{field} must be a date without a time of day, got {value!r}")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"{field} must be a valid YYYY-MM-DD date, got {value!r}")


def validate_month_year(month: int, year: int) -> None:
    """Raise ValidationError unless month is 1-12 and year is a plausible year."""
    if not isinstance(month, int) or isinstance(month, bool) or not 1 <= month <= 12:
        raise ValidationError(f"month must be between 1 and 12, got {month!r}")
    if not isinstance(year, int) or isinstance(year, bool) or not 1 <= year <= 9999:
        raise ValidationError(f"year must be between 1 and 9999, got {year!r}")


def validate_pct(value: int, field: str = "allocation_pct") -> int:
    """Validate an integer percentage in the range 0-100."""
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 100:
        raise ValidationError(f"{field} must be an integer between 0 and 100, got {value!r}")
    return value
