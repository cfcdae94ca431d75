#!/usr/bin/env python3
"""Database migration management script.

Thin wrapper around Alembic for the asset, gallery and template tables.
"""

import sys
import argparse
import subprocess
from pathlib import Path

project_root = Path(__file__).parent.parent


class MigrationManager:
    """Manage database migrations."""

    def __init__(self):
        self.alembic_ini = project_root / "infra" / "migrations" / "alembic.ini"

    def run_alembic(self, command: str, *args) -> int:
        """Run an alembic command."""
        cmd = ["alembic", "-c", str(self.alembic_ini), command] + list(args)
        print(f"Running: {' '.join(cmd)}")
        return subprocess.call(cmd)

    def create(self, message: str) -> int:
        print(f"Creating migration: {message}")
        return self.run_alembic("revision", "--autogenerate", "-m", message)

    def upgrade(self, revision: str = "head") -> int:
        print(f"Upgrading database to {revision}...")
        return self.run_alembic("upgrade", revision)

    def downgrade(self, revision: str) -> int:
        print(f"Downgrading database to {revision}...")
        return self.run_alembic("downgrade", revision)

    def current(self) -> int:
        return self.run_alembic("current")

    def history(self, verbose: bool = False) -> int:
        args = ["--verbose"] if verbose else []
        return self.run_alembic("history", *args)


def main():
    parser = argparse.ArgumentParser(
        description="Database migration management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  DATABASE_URL=postgresql://... python scripts/migrate.py upgrade
  python scripts/migrate.py create "add tags to gallery"
  python scripts/migrate.py downgrade -1
        """
    )
    subparsers = parser.add_subparsers(dest="command", help="Migration commands")

    create_parser = subparsers.add_parser("create", help="Create a new migration")
    create_parser.add_argument("message", help="Migration message")

    upgrade_parser = subparsers.add_parser("upgrade", help="Upgrade database")
    upgrade_parser.add_argument("revision", nargs="?", default="head", help="Target revision (default: head)")

    downgrade_parser = subparsers.add_parser("downgrade", help="Downgrade database")
    downgrade_parser.add_argument("revision", help="Target revision")

    subparsers.add_parser("current", help="Show current revision")

    history_parser = subparsers.add_parser("history", help="Show migration history")
    history_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        return 1

    manager = MigrationManager()
    if args.command == "create":
        return manager.create(args.message)
    if args.command == "upgrade":
        return manager.upgrade(args.revision)
    if args.command == "downgrade":
        return manager.downgrade(args.revision)
    if args.command == "current":
        return manager.current()
    return manager.history(args.verbose)


if __name__ == "__main__":
    sys.exit(main())
