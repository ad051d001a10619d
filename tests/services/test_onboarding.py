import pytest
from decimal import Decimal

from errors import ConflictError, ValidationError
from models.category import CategoryType
from services.onboarding import CategoryDefinition


def default_definitions():
    return [
        CategoryDefinition("Spending", "spending", 30, emoji="🛒"),
        CategoryDefinition("Saving", "saving", 40),
        CategoryDefinition("Investing", "investment", 30),
    ]


def assert_nothing_written(services):
    assert services.settings.find() is None
    assert services.categories.find_all() == []
    assert services.budgets.list_periods() == []


class TestOnboardingService:
    """Tests for OnboardingService."""

    def test_complete_creates_everything(self, services):
        result = services.onboarding.complete("4000", 3, 2025, default_definitions())

        settings = services.settings.find()
        assert settings.monthly_income == Decimal("4000")
        assert settings.onboarding_completed is True

        assert [c.name for c in result.categories] == ["Spending", "Saving", "Investing"]
        assert [c.sort_order for c in result.categories] == [0, 1, 2]
        assert result.categories[0].emoji == "🛒"
        assert result.categories[2].type == CategoryType.INVESTMENT

        assert result.budget.income == Decimal("4000")
        assert (result.budget.month, result.budget.year) == (3, 2025)
        assert [a.allocation_pct for a in result.budget.allocations] == [30, 40, 30]
        assert [a.category_id for a in result.budget.allocations] == [
            c.id for c in result.categories
        ]

    def test_next_month_bootstraps_from_onboarded_budget(self, services):
        result = services.onboarding.complete(4000, 3, 2025, default_definitions())

        april = services.budgets.get_or_create(4, 2025)

        assert april.income == Decimal("4000")
        assert april.allocations == result.budget.allocations

    @pytest.mark.parametrize("pcts", [(30, 40, 29), (30, 40, 31), (0, 0, 0)])
    def test_total_must_be_exactly_100(self, services, pcts):
        definitions = [
            CategoryDefinition(f"Category {i}", "spending", pct) for i, pct in enumerate(pcts)
        ]

        with pytest.raises(ValidationError, match="100"):
            services.onboarding.complete(4000, 3, 2025, definitions)

        assert_nothing_written(services)

    def test_requires_a_category(self, services):
        with pytest.raises(ValidationError):
            services.onboarding.complete(4000, 3, 2025, [])

        assert_nothing_written(services)

    def test_rejects_duplicate_names(self, services):
        definitions = [
            CategoryDefinition("Fun", "spending", 50),
            CategoryDefinition("Fun", "custom", 50),
        ]

        with pytest.raises(ValidationError):
            services.onboarding.complete(4000, 3, 2025, definitions)

        assert_nothing_written(services)

    def test_rejects_unknown_type(self, services):
        definitions = [CategoryDefinition("Crypto", "gambling", 100)]

        with pytest.raises(ValidationError):
            services.onboarding.complete(4000, 3, 2025, definitions)

        assert_nothing_written(services)

    @pytest.mark.parametrize("income", [0, -4000, "nope"])
    def test_rejects_invalid_income(self, services, income):
        with pytest.raises(ValidationError):
            services.onboarding.complete(income, 3, 2025, default_definitions())

        assert_nothing_written(services)

    def test_conflict_rolls_back_every_step(self, services):
        """Test that a failure part-way through leaves no half-onboarded owner."""
        services.budgets.get_or_create(3, 2025)

        with pytest.raises(ConflictError):
            services.onboarding.complete(4000, 3, 2025, default_definitions())

        assert services.settings.find() is None
        assert services.categories.find_all() == []
        assert services.budgets.find(3, 2025).allocations == []

    def test_existing_category_name_conflicts(self, services):
        services.categories.create("Saving", "saving")

        with pytest.raises(ConflictError):
            services.onboarding.complete(4000, 3, 2025, default_definitions())

        assert services.settings.find() is None
        assert [c.name for c in services.categories.find_all()] == ["Saving"]
        assert services.budgets.list_periods() == []

    def test_other_owner_unaffected(self, services, other_services):
        services.onboarding.complete(4000, 3, 2025, default_definitions())

        result = other_services.onboarding.complete(2500, 3, 2025, default_definitions())

        assert result.budget.income == Decimal("2500")
        assert len(services.categories.find_all()) == 3
