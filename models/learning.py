"""Models for the per-user learning store."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

MERCHANT_PREFIX = "merchant:"


@dataclass
class LearningEntry:
    """A weighted (user, keyword) -> category association.

    Attributes:
        user_id: Owner of the association.
        keyword: Normalized unigram, bigram, or "merchant:<name>".
        category_id: Category the keyword points to.
        confidence_weight: Strength of the association (capped, never negative).
        usage_count: Number of times the user confirmed this association.
        last_used_at: When the association was last reinforced.
    """

    user_id: int
    keyword: str
    category_id: int
    confidence_weight: float
    usage_count: int
    last_used_at: datetime

    @property
    def is_merchant(self) -> bool:
        return self.keyword.startswith(MERCHANT_PREFIX)


@dataclass
class LearningMatch:
    """Best category found in a user's learning history for a description."""

    category_id: int
    confidence: float
    matched_keywords: List[str] = field(default_factory=list)


@dataclass
class LearningStats:
    """Aggregate view of one user's learning history."""

    unique_keywords: int
    categories_learned: int
    total_usage: int
    average_confidence: float
