#!/usr/bin/env python3
"""
Budgetr CLI - Monthly budgeting from the command line.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    onboard      First-time setup of income and categories
    categories   Manage categories
    entries      Log and manage entries
    budget       Monthly income and allocations
    goals        Long-term goals
    cards        Credit card bonus trackers
    dashboard    Monthly progress
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli onboard --default-split
    python -m cli entries add 1 42.50 --description "Groceries"
    python -m cli budget allocate 1=30 2=40 3=30
    python -m cli dashboard --month 2025-02
"""

import sys
import argparse
from cli import budget, cards, categories, dashboard, entries, goals, migrate, onboarding
from config import load_config
from errors import BudgetrError
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Budgetr - Personal monthly budgeting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    onboarding.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    entries.setup_parser(subparsers)
    budget.setup_parser(subparsers)
    goals.setup_parser(subparsers)
    cards.setup_parser(subparsers)
    dashboard.setup_parser(subparsers)
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
        except BudgetrError as e:
            print(f"Error: {e}")
            sys.exit(1)
        except Exception as e:
            print(f"Unexpected error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
