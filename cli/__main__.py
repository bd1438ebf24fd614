#!/usr/bin/env python3
"""
Centavo CLI - Command-line interface for the category inference engine.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    categories   Manage the category catalog
    learning     Per-user learning maintenance
    infer        Try category inference on a description
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli categories seed
    python -m cli infer "cafe en starbucks" 65 --user 1 --learn
    python -m cli learning stats --user 1
    python -m cli learning decay --days 90
"""

import sys
import argparse
from cli import categories, infer, learning, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Centavo - Expense category inference",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    categories.setup_parser(subparsers)
    learning.setup_parser(subparsers)
    infer.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # migrate works on the raw database, everything else on services
            if args.command == "migrate":
                args.func(args, DatabaseManager(config))
            else:
                args.func(args, Services(config))
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
