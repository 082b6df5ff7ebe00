"""Academy database management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_databases():
    from academy.domain import academy
    from academy.utils.db import setup_db

    print("Initializing academy domain...")
    academy.init()
    print("Creating academy database schema...")
    setup_db(academy)
    print("Done.")


def drop_databases():
    from academy.domain import academy
    from academy.utils.db import drop_db

    print("Initializing academy domain...")
    academy.init()
    print("Dropping academy database schema...")
    drop_db(academy)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Academy database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
