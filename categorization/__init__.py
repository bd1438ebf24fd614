"""Category inference for expense descriptions.

Inference cascades through three tiers, cheapest first: the user's own
learning history, global keyword/amount matching against the category
catalog, and finally an LLM classifier.
"""

from categorization.keywords import extract_keywords, extract_merchant
from categorization.engine import CategoryInferenceEngine

__all__ = ["CategoryInferenceEngine", "extract_keywords", "extract_merchant"]
