"""Inference orchestrator: tier cascade and confirmation suggestions."""

import math
from typing import Callable, List, NamedTuple, Optional
from config import InferenceSettings
from llm.providers.base import LLMProvider
from models.category import Category
from models.inference import CategorySuggestion, InferenceMethod, InferenceResult
from logger import get_logger

logger = get_logger()


class _Tier(NamedTuple):
    method: InferenceMethod
    threshold: float
    infer: Callable[[int, str, Optional[float]], Optional[InferenceResult]]


class CategoryInferenceEngine:
    """Assigns a category to an expense description.

    The learning store and keyword matcher are tried in order and the first
    whose confidence clears its threshold wins. Otherwise the LLM classifier
    answers, whatever its confidence. A failing or disabled classifier yields
    the uncategorized category with confidence 0.0, so callers always get a
    usable result.

    Args:
        learning: LearningService instance.
        matcher: KeywordMatcher instance.
        categories: CategoryCache instance.
        expenses: ExpenseService instance (for frequently used categories).
        classifier: LLMProvider, or None when LLM classification is disabled.
        settings: Inference tunables.
        ai_timeout: Default seconds to wait for the classifier.
    """

    def __init__(
        self,
        learning,
        matcher,
        categories,
        expenses,
        classifier: Optional[LLMProvider] = None,
        settings: Optional[InferenceSettings] = None,
        ai_timeout: Optional[float] = None,
    ):
        self.learning = learning
        self.matcher = matcher
        self.categories = categories
        self.expenses = expenses
        self.classifier = classifier
        self.settings = settings or InferenceSettings()
        self.ai_timeout = ai_timeout

        self._tiers = [
            _Tier(
                InferenceMethod.USER_LEARNING,
                self.settings.user_learning_threshold,
                self._from_learning,
            ),
            _Tier(
                InferenceMethod.KEYWORD_MATCHING,
                self.settings.keyword_threshold,
                self._from_keywords,
            ),
        ]

    def infer_category(
        self,
        user_id: int,
        description: str,
        amount: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> InferenceResult:
        """Infer the category of an expense description.

        Args:
            user_id: User who recorded the expense.
            description: Raw expense description.
            amount: Optional amount in pesos.
            timeout: Seconds to wait for the LLM classifier. Defaults to the
                     configured timeout.

        Returns:
            InferenceResult. Never raises because of the classifier.
        """
        for tier in self._tiers:
            result = tier.infer(user_id, description, amount)
            if result is None:
                logger.debug(f"{tier.method.value}: no match")
                continue
            if result.confidence >= tier.threshold:
                logger.info(
                    f"Inferred category {result.category_id} for user {user_id} "
                    f"via {tier.method.value} ({result.confidence:.2f})"
                )
                return result
            logger.debug(
                f"{tier.method.value}: confidence {result.confidence:.2f} "
                f"below threshold {tier.threshold}"
            )

        return self._from_classifier(description, amount, timeout)

    def build_suggestions(
        self,
        confidence: float,
        category_id: Optional[int],
        user_id: int,
        description: str,
    ) -> List[CategorySuggestion]:
        """Build the options for the category confirmation prompt.

        The inferred category always comes first. When confidence is below
        the suggestion threshold, the user's most used recent categories and
        the uncategorized fallback are offered as alternatives.

        Args:
            confidence: Confidence of the inferred category.
            category_id: Inferred category. Unknown or None falls back to
                         the uncategorized category.
            user_id: User to suggest for.
            description: Expense description being confirmed.

        Returns:
            Suggestions without duplicate categories and exactly one marked
            primary, or an empty list if the catalog is empty.
        """
        s = self.settings
        primary = self.categories.get(category_id) or self._uncategorized()
        if primary is None:
            logger.warning(f"No category available to suggest for '{description}'")
            return []

        suggestions = [self._suggestion(primary, confidence, is_primary=True)]
        if confidence >= s.suggestion_threshold:
            return suggestions

        seen = {primary.id}
        frequent_ids = self.expenses.frequent_category_ids(
            user_id,
            days=s.frequent_categories_days,
            limit=s.frequent_categories_limit + 1,
        )
        alternatives = [
            cid for cid in frequent_ids if cid != primary.id
        ][: s.frequent_categories_limit]

        for cid in alternatives:
            category = self.categories.get(cid)
            if category is not None and category.id not in seen:
                suggestions.append(self._suggestion(category, 0.0))
                seen.add(category.id)

        fallback = self._uncategorized()
        if fallback is not None and fallback.id not in seen:
            suggestions.append(self._suggestion(fallback, 0.0))

        return suggestions

    def _from_learning(
        self, user_id: int, description: str, amount: Optional[float]
    ) -> Optional[InferenceResult]:
        match = self.learning.find_best_match(user_id, description)
        if match is None:
            return None
        return InferenceResult(
            category_id=match.category_id,
            confidence=match.confidence,
            method=InferenceMethod.USER_LEARNING,
            matched_keywords=match.matched_keywords,
        )

    def _from_keywords(
        self, user_id: int, description: str, amount: Optional[float]
    ) -> Optional[InferenceResult]:
        match = self.matcher.match_by_keywords(description, amount)
        if match is None:
            return None
        return InferenceResult(
            category_id=match.category_id,
            confidence=match.confidence,
            method=InferenceMethod.KEYWORD_MATCHING,
            matched_keywords=match.matched_keywords,
        )

    def _from_classifier(
        self, description: str, amount: Optional[float], timeout: Optional[float]
    ) -> InferenceResult:
        if self.classifier is None:
            logger.info("LLM classification disabled - using uncategorized")
            return self._fallback("LLM classification disabled")

        categories = self.categories.all()
        if not categories:
            logger.warning("No categories available - cannot classify expense")
            return self._fallback("No categories available")

        try:
            answer = self.classifier.classify(
                description,
                amount,
                categories,
                timeout=timeout if timeout is not None else self.ai_timeout,
            )
            confidence = min(max(float(answer.confidence), 0.0), 1.0)
        except Exception as e:
            logger.error(f"LLM classification failed: {e}")
            return self._fallback("Failed to infer category")

        if math.isnan(confidence):
            logger.warning("LLM answered a non-numeric confidence")
            return self._fallback("Failed to infer category")

        if answer.category_slug is None:
            category = self._uncategorized()
        else:
            category = self.categories.get_by_slug(answer.category_slug)
            if category is None:
                logger.warning(
                    f"LLM answered unknown category slug '{answer.category_slug}'"
                )
                return self._fallback("Unknown category returned")

        logger.info(
            f"Inferred category {category.id if category else None} "
            f"via {InferenceMethod.AI_INFERENCE.value} ({confidence:.2f})"
        )
        return InferenceResult(
            category_id=category.id if category else None,
            confidence=confidence,
            method=InferenceMethod.AI_INFERENCE,
            reasoning=answer.reasoning,
        )

    def _fallback(self, reasoning: str) -> InferenceResult:
        category = self._uncategorized()
        return InferenceResult(
            category_id=category.id if category else None,
            confidence=0.0,
            method=InferenceMethod.AI_INFERENCE,
            reasoning=reasoning,
        )

    def _uncategorized(self) -> Optional[Category]:
        return self.categories.get_by_slug(self.settings.uncategorized_slug)

    @staticmethod
    def _suggestion(
        category: Category, confidence: float, is_primary: bool = False
    ) -> CategorySuggestion:
        return CategorySuggestion(
            category_id=category.id,
            name=category.name,
            icon=category.icon,
            confidence=confidence,
            is_primary=is_primary,
        )
