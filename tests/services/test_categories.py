import pytest
from datetime import date

from errors import ConflictError, NotFoundError, ValidationError
from models.category import CategoryType


class TestCategoryService:
    """Tests for CategoryService."""

    def test_create_category_defaults_to_spending(self, services):
        """Test creating a category with only a name."""
        category = services.categories.create("Groceries")

        assert category.id is not None
        assert category.id > 0
        assert category.name == "Groceries"
        assert category.type == CategoryType.SPENDING
        assert category.owner_id == "alice"
        assert category.emoji is None
        assert category.color is None

    def test_create_category_with_type_string(self, services):
        category = services.categories.create("Emergency Fund", "saving", emoji="🛟", color="#00aa00")

        assert category.type == CategoryType.SAVING
        assert category.emoji == "🛟"
        assert category.color == "#00aa00"

    def test_create_category_strips_name(self, services):
        category = services.categories.create("  Rent  ")

        assert category.name == "Rent"

    def test_create_category_empty_name_rejected(self, services):
        with pytest.raises(ValidationError):
            services.categories.create("   ")

    def test_create_category_unknown_type_rejected(self, services):
        with pytest.raises(ValidationError, match="Unknown category type"):
            services.categories.create("Stuff", "crypto")

    def test_create_duplicate_name_conflicts(self, services):
        services.categories.create("Groceries")

        with pytest.raises(ConflictError):
            services.categories.create("Groceries")

    def test_same_name_allowed_for_different_owners(self, services, other_services):
        """Test that category names are only unique per owner."""
        mine = services.categories.create("Groceries")
        theirs = other_services.categories.create("Groceries")

        assert mine.id != theirs.id

    def test_create_appends_to_sort_order(self, services):
        first = services.categories.create("Rent")
        second = services.categories.create("Food")

        assert first.sort_order == 0
        assert second.sort_order == 1

    def test_find_category_by_id(self, services):
        created = services.categories.create("Transport", "spending")

        found = services.categories.find(created.id)

        assert found is not None
        assert found.id == created.id
        assert found.name == "Transport"

    def test_find_category_not_found(self, services):
        assert services.categories.find(9999) is None

    def test_find_foreign_category_returns_none(self, services, other_services):
        theirs = other_services.categories.create("Hobbies")

        assert services.categories.find(theirs.id) is None

    def test_get_missing_category_raises(self, services):
        with pytest.raises(NotFoundError, match="Category 9999 not found"):
            services.categories.get(9999)

    def test_find_by_name_case_sensitive(self, services):
        services.categories.create("Shopping")

        assert services.categories.find_by_name("Shopping") is not None
        assert services.categories.find_by_name("shopping") is None

    def test_find_all_empty(self, services):
        categories = services.categories.find_all()

        assert categories == []
        assert isinstance(categories, list)

    def test_find_all_only_returns_own_categories(self, services, other_services):
        services.categories.create("Rent")
        other_services.categories.create("Travel")

        names = [c.name for c in services.categories.find_all()]

        assert names == ["Rent"]

    def test_update_category(self, services):
        category = services.categories.create("Eating Out", emoji="🍔")

        updated = services.categories.update(
            category.id, name="Restaurants", category_type="custom", emoji=None
        )

        assert updated.name == "Restaurants"
        assert updated.type == CategoryType.CUSTOM
        assert updated.emoji is None

    def test_update_without_changes_returns_category(self, services):
        category = services.categories.create("Rent", color="blue")

        updated = services.categories.update(category.id)

        assert updated == category

    def test_update_to_taken_name_conflicts(self, services):
        services.categories.create("Rent")
        food = services.categories.create("Food")

        with pytest.raises(ConflictError):
            services.categories.update(food.id, name="Rent")

    def test_update_foreign_category_not_found(self, services, other_services):
        theirs = other_services.categories.create("Travel")

        with pytest.raises(NotFoundError):
            services.categories.update(theirs.id, name="Mine now")

        assert other_services.categories.get(theirs.id).name == "Travel"

    def test_reorder(self, services):
        rent = services.categories.create("Rent")
        food = services.categories.create("Food")
        fun = services.categories.create("Fun")

        updated = services.categories.reorder([(fun.id, 0), (rent.id, 1), (food.id, 2)])

        assert updated == 3
        assert [c.name for c in services.categories.find_all()] == ["Fun", "Rent", "Food"]

    def test_reorder_ignores_foreign_categories(self, services, other_services):
        mine = services.categories.create("Rent")
        theirs = other_services.categories.create("Travel")

        updated = services.categories.reorder([(mine.id, 5), (theirs.id, 9)])

        assert updated == 1
        assert other_services.categories.get(theirs.id).sort_order == 0

    def test_reorder_empty(self, services):
        assert services.categories.reorder([]) == 0

    def test_delete_category(self, services):
        category = services.categories.create("Temporary")

        services.categories.delete(category.id)

        assert services.categories.find(category.id) is None

    def test_delete_missing_category_raises(self, services):
        with pytest.raises(NotFoundError):
            services.categories.delete(9999)

    def test_delete_cascades_to_dependents(self, services):
        """Test that entries, goals, trackers and allocations go with the category."""
        card = services.categories.create("Sapphire", "credit_card")
        keep = services.categories.create("Rent")
        services.entries.create(card.id, "120.00", date(2025, 3, 2))
        services.goals.upsert(card.id, "Bonus", 4000)
        services.credit_cards.upsert(card.id, "Sapphire", 4000, date(2025, 3, 1))
        services.budgets.get_or_create(3, 2025)
        services.budgets.replace_allocations(3, 2025, [(card.id, 20), (keep.id, 80)])

        services.categories.delete(card.id)

        assert services.entries.list_for_category(card.id) == []
        assert services.goals.find(card.id) is None
        assert services.credit_cards.find(card.id) is None
        budget = services.budgets.find(3, 2025)
        assert [a.category_id for a in budget.allocations] == [keep.id]

    def test_owned_ids_excludes_other_owners(self, services, other_services):
        rent = services.categories.create("Rent")
        fun = services.categories.create("Fun")
        other_services.categories.create("Travel")

        with services.db_manager.connect() as conn:
            assert services.categories.owned_ids(conn) == {rent.id, fun.id}
