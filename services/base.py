"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services, scoped to one owner.

    This class provides a centralized way to access all services and makes
    it easy to inject a test database.

    Args:
        config: Application configuration object.
        owner_id: Identity of the owner every service reads and writes for.
        db_manager: Optional database manager for testing. If provided, config is ignored.
    """

    def __init__(self, config: Config, owner_id: str = None, db_manager=None):
        """Initialize services with configuration.

        Args:
            config: Config object containing application configuration.
            owner_id: Owner identity. Defaults to the owner in config.
            db_manager: Optional database manager for dependency injection (testing).
                       If None, creates DatabaseManager from config.
        """
        self.config = config
        self.owner_id = owner_id or config.owner_id
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.budgets import BudgetService
        from services.categories import CategoryService
        from services.credit_cards import CreditCardService
        from services.entries import EntryService
        from services.goals import GoalService
        from services.onboarding import OnboardingService
        from services.settings import SettingsService

        self.settings = SettingsService(self.db_manager, self.owner_id)
        self.categories = CategoryService(self.db_manager, self.owner_id)
        self.entries = EntryService(self.db_manager, self.owner_id)
        self.budgets = BudgetService(
            self.db_manager, self.owner_id, self.settings, self.categories
        )
        self.goals = GoalService(self.db_manager, self.owner_id)
        self.credit_cards = CreditCardService(self.db_manager, self.owner_id)
        self.onboarding = OnboardingService(
            self.db_manager,
            self.owner_id,
            self.settings,
            self.categories,
            self.budgets,
        )
