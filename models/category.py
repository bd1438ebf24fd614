"""Category model for expense categorization."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Category:
    """Represents a spending category.

    Categories form a two-level tree: a parent "group" (e.g. Food & Dining)
    and its subcategories (e.g. Coffee Shops).

    Attributes:
        id: Unique identifier (auto-generated).
        slug: Stable key, e.g. "coffee_shops" (unique).
        name: Display name.
        parent_id: Optional parent category ID.
        keywords: Ordered keyword list used by the keyword matcher.
        icon: Optional emoji shown in confirmation prompts.
        is_active: Inactive categories are never suggested.
    """

    id: int
    slug: str
    name: str
    parent_id: Optional[int] = None
    keywords: List[str] = field(default_factory=list)
    icon: Optional[str] = None
    is_active: bool = True

    @property
    def normalized_keywords(self) -> List[str]:
        """Lower-cased keywords with blanks removed, original order kept."""
        return [k.strip().lower() for k in self.keywords if k and k.strip()]
