#!/usr/bin/env python3

import sys
import json
from pathlib import Path
from logger import get_logger

logger = get_logger()

SEED_FILE = Path(__file__).parent.parent / "db" / "seed" / "categories.json"


def cmd_list(args, services):
    """List the category tree."""
    categories = services.categories.find_all()

    if not categories:
        logger.info("No categories found. Run 'python -m cli categories seed'.")
        return

    children = {}
    for category in categories:
        children.setdefault(category.parent_id, []).append(category)

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for parent in children.get(None, []):
        logger.info(_describe(parent))
        for child in children.get(parent.id, []):
            logger.info(f"    {_describe(child)}")

    logger.info(f"\nTotal categories: {len(categories)}")


def _describe(category) -> str:
    status = "" if category.is_active else " [inactive]"
    keywords = ", ".join(category.keywords[:5])
    return (
        f"{category.icon or '📋'} {category.name} ({category.slug}, ID {category.id})"
        f"{status} - {keywords}"
    )


def cmd_delete(args, services):
    """Delete a category by ID."""
    category = services.categories.find(args.category_id)
    if not category:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    logger.info(f"\nCategory to delete: {category.name} ({category.slug})")
    confirm = (
        input("\nAre you sure you want to delete this category? (yes/no): ")
        .strip()
        .lower()
    )
    if confirm != "yes":
        logger.info("Deletion cancelled.")
        return

    if services.categories.delete(category.id):
        services.category_cache.invalidate()
        logger.info(f"✓ Category '{category.name}' deleted successfully.")
    else:
        logger.error("Failed to delete category.")
        sys.exit(1)


def cmd_seed(args, services):
    """Seed categories from JSON file."""
    seed_file = Path(args.file) if args.file else SEED_FILE

    if not seed_file.exists():
        logger.error(f"Seed file not found: {seed_file}")
        sys.exit(1)

    try:
        with open(seed_file, "r", encoding="utf-8") as f:
            categories_data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing JSON file: {e}")
        sys.exit(1)

    logger.info(f"\nSeeding categories from {seed_file}")
    logger.info("=" * 80)

    created, skipped = services.categories.seed(categories_data)
    services.category_cache.invalidate()

    logger.info("=" * 80)
    logger.info("\nSeeding complete!")
    logger.info(f"Created: {created}")
    logger.info(f"Skipped: {skipped}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="List, seed, and delete expense categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List all categories")
    list_parser.set_defaults(func=cmd_list)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category by ID"
    )
    delete_parser.add_argument(
        "category_id",
        type=int,
        help="ID of the category to delete",
    )
    delete_parser.set_defaults(func=cmd_delete)

    seed_parser = categories_subparsers.add_parser(
        "seed", help="Seed categories from JSON file"
    )
    seed_parser.add_argument(
        "--file",
        help="Seed file to load (default: db/seed/categories.json)",
    )
    seed_parser.set_defaults(func=cmd_seed)
