"""Base provider interface for LLM implementations."""

from abc import ABC, abstractmethod
from typing import List, Optional
from dataclasses import dataclass
from models.category import Category


@dataclass
class AIClassification:
    """An LLM's answer for a single expense description."""

    category_slug: Optional[str]
    confidence: float  # 0.0 to 1.0
    reasoning: str = ""


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Each provider can implement classification in its own optimal way,
    using provider-specific features like structured outputs.
    """

    @abstractmethod
    def classify(
        self,
        description: str,
        amount: Optional[float],
        categories: List[Category],
        timeout: Optional[float] = None,
    ) -> AIClassification:
        """Pick the best category slug for an expense description.

        Args:
            description: Raw expense description.
            amount: Optional amount in pesos.
            categories: Active categories the answer must come from.
            timeout: Maximum seconds to wait for the provider.

        Returns:
            AIClassification. category_slug may be None if the model could
            not decide.

        Raises:
            Exception: If the API call fails, times out or returns an
                       unusable response.
        """
        pass
