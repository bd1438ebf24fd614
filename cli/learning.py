#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()


def cmd_decay(args, services):
    """Decay confidence weights of learning entries unused for a while."""
    days = args.days if args.days is not None else services.config.inference.decay_days
    logger.info(f"Decaying learning entries older than {days} days...")

    decayed = services.learning.decay(days)

    logger.info(f"✓ Learning decay completed ({decayed} entries).")


def cmd_stats(args, services):
    """Show a user's learning statistics."""
    stats = services.learning.stats(args.user)

    logger.info(f"\nLearning stats for user {args.user}:")
    logger.info("=" * 40)
    logger.info(f"Unique keywords:    {stats.unique_keywords}")
    logger.info(f"Categories learned: {stats.categories_learned}")
    logger.info(f"Total usage:        {stats.total_usage}")
    logger.info(f"Avg confidence:     {stats.average_confidence}")

    if args.verbose:
        logger.info("\nStrongest associations:")
        for entry in services.learning.find_entries(args.user)[:20]:
            logger.info(
                f"  {entry.keyword} -> {entry.category_id} "
                f"(weight {entry.confidence_weight:.2f}, used {entry.usage_count}x)"
            )


def setup_parser(subparsers):
    """Setup learning subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "learning",
        help="Per-user learning maintenance",
        description="Inspect and maintain the per-user learning store",
    )

    learning_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available learning commands",
        dest="subcommand",
        required=True,
    )

    decay_parser = learning_subparsers.add_parser(
        "decay", help="Decay weights of old learning entries"
    )
    decay_parser.add_argument(
        "--days",
        type=int,
        help="Age in days after which entries start decaying (default from config)",
    )
    decay_parser.set_defaults(func=cmd_decay)

    stats_parser = learning_subparsers.add_parser(
        "stats", help="Show a user's learning statistics"
    )
    stats_parser.add_argument("--user", type=int, required=True, help="User ID")
    stats_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Also list associations"
    )
    stats_parser.set_defaults(func=cmd_stats)
