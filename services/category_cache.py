"""Read-through cache of the active category catalog."""

import threading
import time
from typing import Callable, Dict, List, Optional
from models.category import Category
from logger import get_logger

logger = get_logger()


class CategoryCache:
    """Caches the active categories for a fixed time-to-live.

    The catalog changes rarely, so the matcher and the inference engine read
    it through this cache instead of hitting the database per expense. Call
    invalidate() after editing categories to see the change immediately.

    Args:
        loader: Callable returning the active categories (e.g.
                CategoryService.find_active).
        ttl_seconds: How long a loaded snapshot stays valid.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        loader: Callable[[], List[Category]],
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._loaded_at: Optional[float] = None
        self._categories: List[Category] = []
        self._by_id: Dict[int, Category] = {}
        self._by_slug: Dict[str, Category] = {}

    def all(self) -> List[Category]:
        """Get the active categories, reloading if the snapshot expired."""
        with self._lock:
            self._refresh_if_stale()
            return list(self._categories)

    def get(self, category_id: Optional[int]) -> Optional[Category]:
        """Get an active category by ID, or None."""
        if category_id is None:
            return None
        with self._lock:
            self._refresh_if_stale()
            return self._by_id.get(category_id)

    def get_by_slug(self, slug: Optional[str]) -> Optional[Category]:
        """Get an active category by slug, or None."""
        if not slug:
            return None
        with self._lock:
            self._refresh_if_stale()
            return self._by_slug.get(slug)

    def parent_of(self, category: Category) -> Optional[Category]:
        """Get the (active) parent of a category, or None for top-level ones."""
        return self.get(category.parent_id)

    def invalidate(self) -> None:
        """Drop the snapshot so the next read reloads from the loader."""
        with self._lock:
            self._loaded_at = None

    def _refresh_if_stale(self) -> None:
        now = self._clock()
        if self._loaded_at is not None and now - self._loaded_at < self._ttl:
            return

        categories = self._loader()
        self._categories = categories
        self._by_id = {c.id: c for c in categories}
        self._by_slug = {c.slug: c for c in categories}
        self._loaded_at = now
        logger.debug(f"Loaded {len(categories)} active categories into cache")
