"""Helper utilities for tests."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from llm.providers.base import AIClassification, LLMProvider

# Small catalog: two groups with subcategories plus the uncategorized fallback
CATALOG = [
    {
        "name": "Food & Dining",
        "slug": "food_dining",
        "icon": "🍽️",
        "keywords": ["comida", "food", "restaurante"],
        "children": [
            {
                "name": "Coffee Shops",
                "slug": "coffee_shops",
                "icon": "☕",
                "keywords": ["starbucks", "cafe", "café", "coffee"],
            },
            {
                "name": "Groceries",
                "slug": "groceries",
                "icon": "🛒",
                "keywords": ["oxxo", "walmart", "soriana"],
            },
        ],
    },
    {
        "name": "Transportation",
        "slug": "transportation",
        "icon": "🚗",
        "keywords": ["uber", "taxi"],
        "children": [
            {
                "name": "Fuel",
                "slug": "fuel",
                "icon": "⛽",
                "keywords": ["gasolina", "pemex"],
            },
        ],
    },
    {
        "name": "Other",
        "slug": "other",
        "icon": "📋",
        "keywords": ["otro", "varios"],
        "children": [
            {
                "name": "Uncategorized",
                "slug": "uncategorized",
                "icon": "❓",
                "keywords": ["desconocido"],
            },
        ],
    },
]


def days_ago(days: int) -> datetime:
    """Get an aware UTC datetime the given number of days in the past."""
    return datetime.now(timezone.utc) - timedelta(days=days)


def backdate_learning(db_manager, days: int, keyword: Optional[str] = None) -> None:
    """Set last_used_at of learning entries to `days` ago.

    Args:
        db_manager: Database manager to update through.
        days: Age to give the entries.
        keyword: Only backdate this keyword. All entries if None.
    """
    stamp = days_ago(days).isoformat(timespec="seconds")
    with db_manager.connect() as conn:
        if keyword is None:
            conn.execute("UPDATE category_learning SET last_used_at = ?", (stamp,))
        else:
            conn.execute(
                "UPDATE category_learning SET last_used_at = ? WHERE keyword = ?",
                (stamp, keyword),
            )
        conn.commit()


def set_learning_weight(db_manager, keyword: str, weight: float) -> None:
    """Overwrite the confidence weight of every entry for a keyword."""
    with db_manager.connect() as conn:
        conn.execute(
            "UPDATE category_learning SET confidence_weight = ? WHERE keyword = ?",
            (weight, keyword),
        )
        conn.commit()


class FakeClassifier(LLMProvider):
    """LLM provider stand-in that returns a canned answer or raises.

    Args:
        answer: AIClassification to return.
        error: Exception to raise instead of answering.
    """

    def __init__(
        self,
        answer: Optional[AIClassification] = None,
        error: Optional[Exception] = None,
    ):
        self.answer = answer or AIClassification(
            category_slug=None, confidence=0.0, reasoning=""
        )
        self.error = error
        self.calls: List[dict] = []

    def classify(self, description, amount, categories, timeout=None):
        self.calls.append(
            {
                "description": description,
                "amount": amount,
                "slugs": [c.slug for c in categories],
                "timeout": timeout,
            }
        )
        if self.error is not None:
            raise self.error
        return self.answer
