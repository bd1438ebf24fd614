"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager

_UNSET = object()


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject a test database or a fake LLM classifier.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing.
        llm_provider: Optional classifier to use instead of the one built
                      from config. Pass None to disable LLM classification.
    """

    def __init__(self, config: Config, db_manager=None, llm_provider=_UNSET):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.categories import CategoryService
        from services.category_cache import CategoryCache
        from services.learning import LearningService
        from services.expenses import ExpenseService
        from services.confirmations import ExpenseConfirmationService
        from categorization.engine import CategoryInferenceEngine
        from categorization.matcher import KeywordMatcher
        from categorization.tables import load_amount_ranges
        from llm import get_llm_provider

        settings = config.inference

        self.categories = CategoryService(self.db_manager)
        self.category_cache = CategoryCache(
            self.categories.find_active, ttl_seconds=settings.category_cache_ttl
        )
        self.learning = LearningService(self.db_manager, settings)
        self.expenses = ExpenseService(self.db_manager)
        self.confirmations = ExpenseConfirmationService(self.expenses, self.learning)

        self.matcher = KeywordMatcher(
            self.category_cache,
            load_amount_ranges(settings.amount_ranges_path),
            settings,
        )

        if llm_provider is _UNSET:
            llm_provider = get_llm_provider(config)

        self.inference = CategoryInferenceEngine(
            learning=self.learning,
            matcher=self.matcher,
            categories=self.category_cache,
            expenses=self.expenses,
            classifier=llm_provider,
            settings=settings,
            ai_timeout=config.llm_timeout_seconds,
        )
