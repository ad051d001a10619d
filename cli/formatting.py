"""Presentation helpers for the CLI: money, percentages and status labels."""

import argparse
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Tuple, assert_never

from models.status import Status
from tools.progress import round_pct


def status_label(status: Status) -> str:
    """Get the human-readable label for a status."""
    match status:
        case Status.ON_TRACK:
            return "on track"
        case Status.AHEAD_OF_PACE:
            return "ahead of pace"
        case Status.WATCH_SPENDING:
            return "watch spending"
        case Status.OVER_BUDGET:
            return "over budget"
        case Status.BEHIND:
            return "behind pace"
        case Status.URGENT:
            return "deadline soon"
        case Status.EXPIRED:
            return "window closed"
        case Status.COMPLETE:
            return "complete"
        case Status.NOT_STARTED:
            return "not started"
        case Status.NO_ALLOCATION:
            return "no allocation"
        case _:
            assert_never(status)


def fmt_money(amount) -> str:
    """Format an amount with two decimals and thousands separators."""
    value = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{value:,.2f}"


def fmt_pct(value) -> str:
    return f"{round_pct(Decimal(str(value)))}%"


def month_year_arg(value: str) -> Tuple[int, int]:
    """argparse type for YYYY-MM month arguments; returns (month, year)."""
    try:
        year_text, month_text = value.split("-")
        month, year = int(month_text), int(year_text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM, got '{value}'")
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"Month must be between 01 and 12, got '{value}'")
    return month, year


def resolve_month(value, today: date) -> Tuple[int, int]:
    """Use the parsed --month value, or the month of today when it is absent."""
    if value is None:
        return today.month, today.year
    return value
