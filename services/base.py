"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    The container is the state owned by the calling layer: commands and
    tools receive it explicitly instead of reaching for module globals.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config
            is not used to open the database.
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.accounts import AccountService
        from services.budgets import BudgetService
        from services.categories import CategoryService
        from services.goals import GoalService
        from services.transactions import TransactionService

        self.accounts = AccountService(self.db_manager)
        self.categories = CategoryService(self.db_manager)
        self.budgets = BudgetService(
            self.db_manager, default_alert_threshold=config.default_alert_threshold
        )
        # Transactions refresh budget spent amounts as they change
        self.transactions = TransactionService(self.db_manager, budgets=self.budgets)
        # Contributions are recorded as transfer transactions
        self.goals = GoalService(self.db_manager, transactions=self.transactions)
