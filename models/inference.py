"""Result types produced by the category inference cascade."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class InferenceMethod(str, Enum):
    """Which tier of the cascade produced a result."""

    USER_LEARNING = "user_learning"
    KEYWORD_MATCHING = "keyword_matching"
    AI_INFERENCE = "ai_inference"


@dataclass
class KeywordMatch:
    """Best catalog category for a description by keyword/amount scoring."""

    category_id: int
    confidence: float
    matched_keywords: List[str] = field(default_factory=list)


@dataclass
class InferenceResult:
    """Category assigned to an expense description.

    Attributes:
        category_id: Inferred category, or None if nothing could be assigned.
        confidence: 0.0 to 1.0.
        method: Tier that produced the answer.
        matched_keywords: Keywords that drove a learning/matching result.
        reasoning: Free-text explanation from the AI classifier, if any.
    """

    category_id: Optional[int]
    confidence: float
    method: InferenceMethod
    matched_keywords: List[str] = field(default_factory=list)
    reasoning: Optional[str] = None


@dataclass
class CategorySuggestion:
    """One option in the category confirmation prompt."""

    category_id: int
    name: str
    icon: Optional[str]
    confidence: float
    is_primary: bool
