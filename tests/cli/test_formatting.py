import argparse
import pytest
from datetime import date
from decimal import Decimal

from cli.budget import allocation_arg
from cli.formatting import fmt_money, fmt_pct, month_year_arg, resolve_month, status_label
from models.status import Status


class TestStatusLabel:
    """Tests for status_label."""

    @pytest.mark.parametrize("status", list(Status))
    def test_every_status_has_label(self, status):
        label = status_label(status)

        assert isinstance(label, str)
        assert label

    def test_labels_are_distinct(self):
        labels = [status_label(status) for status in Status]

        assert len(set(labels)) == len(labels)


class TestFormatting:
    def test_fmt_money(self):
        assert fmt_money(Decimal("1234.5")) == "1,234.50"
        assert fmt_money(Decimal("800") / 21) == "38.10"
        assert fmt_money(0) == "0.00"

    def test_fmt_pct(self):
        assert fmt_pct(33.4) == "33%"
        assert fmt_pct(100.0) == "100%"

    def test_fmt_pct_rounds_half_up(self):
        assert fmt_pct(32.5) == "33%"
        assert fmt_pct(Decimal("0.5")) == "1%"
        assert fmt_pct(Decimal("66.49")) == "66%"


class TestArgumentTypes:
    """Tests for argparse type helpers."""

    def test_month_year_arg(self):
        assert month_year_arg("2025-03") == (3, 2025)

    @pytest.mark.parametrize("value", ["2025", "2025-13", "March", "2025-03-01"])
    def test_month_year_arg_invalid(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            month_year_arg(value)

    def test_resolve_month_defaults_to_today(self):
        assert resolve_month(None, date(2025, 7, 4)) == (7, 2025)
        assert resolve_month((2, 2024), date(2025, 7, 4)) == (2, 2024)

    def test_allocation_arg(self):
        assert allocation_arg("3=40") == (3, 40)

    @pytest.mark.parametrize("value", ["3", "3=forty", "a=1", "1=2=3"])
    def test_allocation_arg_invalid(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            allocation_arg(value)
