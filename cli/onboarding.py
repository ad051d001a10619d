#!/usr/bin/env python3

import sys
from datetime import date

from errors import BudgetrError
from logger import get_logger
from models.category import CategoryType
from services.onboarding import CategoryDefinition

logger = get_logger()

DEFAULT_SPLIT = [
    ("Spending", CategoryType.SPENDING, 30),
    ("Saving", CategoryType.SAVING, 40),
    ("Investing", CategoryType.INVESTMENT, 30),
]


def _prompt_int(prompt: str) -> int:
    text = input(prompt).strip()
    try:
        return int(text)
    except ValueError:
        logger.error(f"'{text}' is not a whole number.")
        sys.exit(1)


def cmd_onboard(args, services):
    """Interactively set income and the category split for the first month."""
    settings = services.settings.find()
    if settings and settings.onboarding_completed:
        logger.error("Onboarding has already been completed.")
        sys.exit(1)

    today = date.today()
    print("\nWelcome to Budgetr")
    print("=" * 80)

    income = input("Monthly income: ").strip()

    definitions = []
    if args.default_split:
        definitions = [
            CategoryDefinition(name=name, type=category_type.value, allocation_pct=pct)
            for name, category_type, pct in DEFAULT_SPLIT
        ]
    else:
        types = ", ".join(t.value for t in CategoryType)
        print(f"\nAdd categories (types: {types}). Leave the name empty to finish.")
        while True:
            name = input("\nCategory name: ").strip()
            if not name:
                break
            category_type = input("Type [spending]: ").strip() or CategoryType.SPENDING.value
            pct = _prompt_int("Share of income (%): ")
            emoji = input("Emoji (optional): ").strip() or None
            definitions.append(
                CategoryDefinition(
                    name=name, type=category_type, allocation_pct=pct, emoji=emoji
                )
            )
            total = sum(d.allocation_pct for d in definitions)
            print(f"Allocated so far: {total}% of 100%")

    try:
        result = services.onboarding.complete(
            income, today.month, today.year, definitions
        )
    except BudgetrError as e:
        logger.error(f"Onboarding failed: {e}")
        sys.exit(1)

    logger.info(f"\n✓ Budget for {today.year}-{today.month:02d} created")
    for category in result.categories:
        allocation = result.budget.allocation_for(category.id)
        logger.info(f"  {category.name} ({category.type.value}): {allocation.allocation_pct}%")


def setup_parser(subparsers):
    """Setup onboard subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "onboard",
        help="First-time setup",
        description="Set monthly income and split it across categories",
    )
    parser.add_argument(
        "--default-split",
        action="store_true",
        help="Use Spending 30%%, Saving 40%%, Investing 30%% instead of prompting",
    )
    parser.set_defaults(func=cmd_onboard)
