#!/usr/bin/env python3
"""Wipe all Budgetr data and recreate an empty database.

Only runs when enable_reset = true is set in ~/.config/budgetr.toml.

Usage:
    python -m scripts.reset [--yes]
"""

import argparse
import shutil
import sys

from config import Config, load_config
from db.manager import DatabaseManager
from db.migrator import apply_pending_migrations


def wipe_data_dir(config: Config) -> bool:
    """Delete the data directory (database and logs).

    Returns:
        True if there was anything to delete.
    """
    if not config.base_dir.exists():
        return False
    shutil.rmtree(config.base_dir)
    return True


def recreate_schema(config: Config) -> list:
    """Create the database file and apply every migration to it."""
    db_manager = DatabaseManager(config)
    with db_manager.connect() as conn:
        return apply_pending_migrations(conn, db_manager.get_migrations_dir())


def main(argv=None):
    parser = argparse.ArgumentParser(description="Reset Budgetr to an empty database")
    parser.add_argument("--yes", action="store_true", help="Skip confirmation")
    args = parser.parse_args(argv)

    config = load_config()
    if not config.enable_reset:
        print("Reset is disabled. Set enable_reset = true in ~/.config/budgetr.toml to allow it.")
        sys.exit(1)

    print(f"Data directory: {config.base_dir}")
    print(f"Database:       {config.db_path}")

    if not args.yes:
        response = input(
            "\nThis deletes ALL categories, budgets, entries, goals and trackers. "
            "Continue? (yes/no): "
        )
        if response.strip().lower() != "yes":
            print("Reset cancelled.")
            return

    if wipe_data_dir(config):
        print(f"✓ Deleted {config.base_dir}")

    applied = recreate_schema(config)
    print(f"✓ Fresh database at {config.db_path} ({len(applied)} migration(s) applied)")


if __name__ == "__main__":
    main()
