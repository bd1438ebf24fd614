#!/usr/bin/env python3

import sys
from logger import get_logger

logger = get_logger()


def cmd_infer(args, services):
    """Run category inference on a description and show the suggestions."""
    logger.info(f'Testing category inference for: "{args.description}"')
    if args.amount is not None:
        logger.info(f"Amount: ${args.amount:,.2f} MXN")
    logger.info(f"User: {args.user}\n")

    result = services.inference.infer_category(
        args.user, args.description, args.amount, timeout=args.timeout
    )

    category = services.category_cache.get(result.category_id)
    if category is None:
        logger.error("❌ Could not infer category")
        sys.exit(1)

    display = f"{category.icon or '📋'} {category.name}"
    parent = services.category_cache.parent_of(category)
    if parent:
        display = f"{parent.icon or '📋'} {parent.name} > {display}"

    logger.info(f"🎯 Inferred Category: {display}")
    logger.info(f"📊 Confidence: {round(result.confidence * 100)}%")
    logger.info(f"🔧 Method: {result.method.value}")
    if result.matched_keywords:
        logger.info(f"🏷️ Matched: {', '.join(result.matched_keywords)}")
    if result.reasoning:
        logger.info(f"💭 Reasoning: {result.reasoning}")

    if args.learn:
        learned = services.learning.learn_from_choice(
            args.user, args.description, category.id
        )
        logger.info(f"\n📚 Learned keywords: {', '.join(learned) or '(none)'}")

    stats = services.learning.stats(args.user)
    if stats.total_usage > 0:
        logger.info("\n📈 User Learning Stats:")
        logger.info(f"  Unique Keywords:    {stats.unique_keywords}")
        logger.info(f"  Categories Learned: {stats.categories_learned}")
        logger.info(f"  Total Usage:        {stats.total_usage}")
        logger.info(f"  Avg Confidence:     {stats.average_confidence}")

    suggestions = services.inference.build_suggestions(
        result.confidence, result.category_id, args.user, args.description
    )
    if len(suggestions) > 1:
        logger.info("\n💡 Category Suggestions:")
        for suggestion in suggestions:
            marker = "→" if suggestion.is_primary else " "
            confidence = (
                f" ({round(suggestion.confidence * 100)}%)"
                if suggestion.confidence > 0
                else ""
            )
            logger.info(f"{marker} {suggestion.icon or '📋'} {suggestion.name}{confidence}")


def setup_parser(subparsers):
    """Setup infer subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "infer",
        help="Try category inference on a description",
        description="Run the inference cascade for a user and show suggestions",
    )
    parser.add_argument("description", help="Expense description")
    parser.add_argument("amount", type=float, nargs="?", help="Amount in MXN")
    parser.add_argument("--user", type=int, default=1, help="User ID (default: 1)")
    parser.add_argument(
        "--learn",
        action="store_true",
        help="Reinforce the inferred category in the user's learning store",
    )
    parser.add_argument(
        "--timeout", type=float, help="Seconds to wait for the LLM classifier"
    )
    parser.set_defaults(func=cmd_infer)
