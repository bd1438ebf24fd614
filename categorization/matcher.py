"""Global (non-personalized) keyword and amount matching against the catalog."""

import re
from typing import Dict, List, Optional
from config import InferenceSettings
from categorization.tables import AmountRange
from models.category import Category
from models.inference import KeywordMatch
from logger import get_logger

logger = get_logger()


def _is_whole_word(keyword: str, text: str) -> bool:
    return re.search(rf"\b{re.escape(keyword)}\b", text) is not None


class KeywordMatcher:
    """Scores a description against every active category's keywords.

    Args:
        categories: CategoryCache (or anything with all() and parent_of()).
        amount_ranges: Category slug -> plausible amount band.
        settings: Inference tunables.
    """

    def __init__(
        self,
        categories,
        amount_ranges: Dict[str, AmountRange],
        settings: Optional[InferenceSettings] = None,
    ):
        self.categories = categories
        self.amount_ranges = amount_ranges
        self.settings = settings or InferenceSettings()

    def match_by_keywords(
        self, description: str, amount: Optional[float] = None
    ) -> Optional[KeywordMatch]:
        """Find the catalog category whose keywords best fit a description.

        Args:
            description: Raw expense description.
            amount: Optional amount, used for the amount-band bonus.

        Returns:
            KeywordMatch with confidence capped below certainty, or None if
            no category scored or the catalog is empty.
        """
        text = description.lower()
        best = None
        best_score = 0.0

        for category in self.categories.all():
            score, hits = self._score(category, text, amount)
            if score > best_score:
                best_score = score
                best = KeywordMatch(
                    category_id=category.id,
                    confidence=min(score, self.settings.max_keyword_confidence),
                    matched_keywords=hits,
                )

        if best is not None:
            logger.debug(
                f"Keyword match: category {best.category_id} "
                f"(score {best_score:.2f}) via {best.matched_keywords}"
            )
        return best

    def _score(self, category: Category, text: str, amount: Optional[float]):
        s = self.settings
        score = 0.0
        hits: List[str] = []

        keywords = category.normalized_keywords
        for keyword in keywords:
            if keyword not in text:
                continue
            hits.append(keyword)
            score += s.whole_word_score if _is_whole_word(keyword, text) else s.substring_score
            # Longer keywords are more specific
            score += len(keyword) / 100

        # A keyword appearing at all counts as a merchant hit, once per category
        if any(keyword in text for keyword in keywords):
            score += s.merchant_bonus

        parent = self.categories.parent_of(category)
        if amount is not None and self._amount_fits(category, parent, amount):
            score += s.amount_bonus

        if parent is not None:
            for keyword in parent.normalized_keywords:
                if keyword in text:
                    score += s.parent_keyword_score

        return score, hits

    def _amount_fits(
        self, category: Category, parent: Optional[Category], amount: float
    ) -> bool:
        band = self.amount_ranges.get(category.slug)
        if band is None and parent is not None:
            band = self.amount_ranges.get(parent.slug)
        return band is not None and band.contains(amount)
