"""Category service for database operations."""

import json
from typing import List, Optional, Tuple
from models.category import Category
from logger import get_logger

logger = get_logger()

_CATEGORY_FIELDS = "id, slug, name, parent_id, keywords, icon, is_active"


def _row_to_category(row) -> Category:
    return Category(
        id=row[0],
        slug=row[1],
        name=row[2],
        parent_id=row[3],
        keywords=json.loads(row[4]) if row[4] else [],
        icon=row[5],
        is_active=bool(row[6]),
    )


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Category]:
        """Get all categories, active or not, ordered by name."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_FIELDS} FROM categories ORDER BY name"
            )
            return [_row_to_category(row) for row in cursor.fetchall()]

    def find_active(self) -> List[Category]:
        """Get active categories in catalog (ID) order.

        This is the loader behind the category cache.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_FIELDS} FROM categories WHERE is_active = 1 ORDER BY id"
            )
            return [_row_to_category(row) for row in cursor.fetchall()]

    def find(self, category_id: int) -> Optional[Category]:
        """Get a single category by ID.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"SELECT {_CATEGORY_FIELDS} FROM categories WHERE id = ?",
                (category_id,),
            ).fetchone()
            return _row_to_category(row) if row else None

    def find_by_slug(self, slug: str) -> Optional[Category]:
        """Get a single category by slug.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"SELECT {_CATEGORY_FIELDS} FROM categories WHERE slug = ?",
                (slug,),
            ).fetchone()
            return _row_to_category(row) if row else None

    def create(
        self,
        slug: str,
        name: str,
        keywords: Optional[List[str]] = None,
        parent_id: Optional[int] = None,
        icon: Optional[str] = None,
        is_active: bool = True,
    ) -> Category:
        """Create a new category.

        Args:
            slug: Stable unique key, e.g. "coffee_shops".
            name: Display name.
            keywords: Keywords used by the keyword matcher.
            parent_id: Optional parent category ID.
            icon: Optional emoji.
            is_active: Whether the category can be inferred/suggested.

        Returns:
            The created Category object with id populated.

        Raises:
            sqlite3.IntegrityError: If the slug already exists.
        """
        keywords = list(keywords or [])
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO categories (slug, name, parent_id, keywords, icon, is_active)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    slug,
                    name,
                    parent_id,
                    json.dumps(keywords, ensure_ascii=False),
                    icon,
                    int(is_active),
                ),
            )
            conn.commit()

            return Category(
                id=cursor.lastrowid,
                slug=slug,
                name=name,
                parent_id=parent_id,
                keywords=keywords,
                icon=icon,
                is_active=is_active,
            )

    def update(self, category: Category) -> Category:
        """Persist every field of an existing category.

        Returns:
            The same Category object.

        Raises:
            ValueError: If the category doesn't exist.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                UPDATE categories
                SET slug = ?, name = ?, parent_id = ?, keywords = ?, icon = ?, is_active = ?
                WHERE id = ?
                """,
                (
                    category.slug,
                    category.name,
                    category.parent_id,
                    json.dumps(category.keywords, ensure_ascii=False),
                    category.icon,
                    int(category.is_active),
                    category.id,
                ),
            )
            conn.commit()

            if cursor.rowcount == 0:
                raise ValueError(f"Category with ID {category.id} not found")

            return category

    def seed(self, categories_data: List[dict]) -> Tuple[int, int]:
        """Create categories from seed data, skipping slugs that exist.

        Args:
            categories_data: Top-level category dicts (slug, name, icon,
                             keywords) each with an optional "children" list
                             of dicts of the same shape.

        Returns:
            Tuple of (created, skipped) counts.
        """
        created = 0
        skipped = 0

        for parent_data in categories_data:
            parent, was_created = self._seed_one(parent_data, parent_id=None)
            if parent is None:
                continue
            created += was_created
            skipped += not was_created

            for child_data in parent_data.get("children", []):
                child, was_created = self._seed_one(child_data, parent_id=parent.id)
                if child is None:
                    continue
                created += was_created
                skipped += not was_created

        return created, skipped

    def _seed_one(
        self, data: dict, parent_id: Optional[int]
    ) -> Tuple[Optional[Category], bool]:
        slug = data.get("slug")
        if not slug or not data.get("name"):
            logger.warning(f"Skipping seed category without slug/name: {data}")
            return None, False

        existing = self.find_by_slug(slug)
        if existing:
            logger.info(f"⊘ Skipped '{slug}' (already exists)")
            return existing, False

        category = self.create(
            slug=slug,
            name=data["name"],
            keywords=data.get("keywords", []),
            parent_id=parent_id,
            icon=data.get("icon"),
        )
        logger.info(f"✓ Created '{slug}' (ID: {category.id})")
        return category, True

    def delete(self, category_id: int) -> bool:
        """Delete a category by ID.

        Returns:
            True if category was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()
            return cursor.rowcount > 0
