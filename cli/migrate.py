#!/usr/bin/env python3

from db.migrator import apply_pending_migrations, get_available_migrations, get_pending_migrations
from logger import get_logger

logger = get_logger()


def cmd_status(args, db_manager):
    """List every migration and whether it has been applied."""
    if not db_manager.get_db_path().exists():
        logger.info("No database yet. Run 'python -m cli migrate apply' to create it.")
        return

    migrations_dir = db_manager.get_migrations_dir()
    available = get_available_migrations(migrations_dir)
    if not available:
        logger.info(f"No migrations found in {migrations_dir}.")
        return

    with db_manager.connect() as conn:
        pending = set(get_pending_migrations(conn, migrations_dir))

    for migration in available:
        state = "pending" if migration in pending else "applied"
        logger.info(f"  [{state:>7}] {migration}")

    logger.info(f"\n{len(available) - len(pending)} applied, {len(pending)} pending")


def cmd_apply(args, db_manager):
    """Apply pending migrations, creating the database if needed."""
    with db_manager.connect() as conn:
        applied = apply_pending_migrations(conn, db_manager.get_migrations_dir())

    if applied:
        logger.info(f"✓ Applied {len(applied)} migration(s) to {db_manager.get_db_path()}")
    else:
        logger.info("Database is up to date.")


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Database migrations",
        description="Create or upgrade the database schema",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration commands",
        dest="subcommand",
        required=True,
    )

    status_parser = migrate_subparsers.add_parser("status", help="Show migration status")
    status_parser.set_defaults(func=cmd_status)

    apply_parser = migrate_subparsers.add_parser("apply", help="Apply pending migrations")
    apply_parser.set_defaults(func=cmd_apply)
