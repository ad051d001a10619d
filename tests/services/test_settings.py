import pytest
from decimal import Decimal

from errors import ValidationError


class TestSettingsService:
    """Tests for SettingsService."""

    def test_find_before_onboarding(self, services):
        assert services.settings.find() is None

    def test_upsert_creates_settings(self, services):
        settings = services.settings.upsert("4000.00")

        assert settings.owner_id == "alice"
        assert settings.monthly_income == Decimal("4000.00")
        assert settings.onboarding_completed is True

    def test_upsert_updates_existing_settings(self, services):
        services.settings.upsert(4000)

        settings = services.settings.upsert(0, onboarding_completed=False)

        assert settings.monthly_income == Decimal("0")
        assert settings.onboarding_completed is False

    def test_upsert_rejects_negative_income(self, services):
        with pytest.raises(ValidationError):
            services.settings.upsert(-1)

    def test_settings_scoped_to_owner(self, services, other_services):
        services.settings.upsert(4000)

        assert other_services.settings.find() is None
