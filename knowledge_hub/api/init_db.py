"""
Database initialization script

Run this script to initialize the database and create all tables.

Usage:
    python -m knowledge_hub.api.init_db [--reset]
"""

import argparse
import sys

from sqlalchemy import inspect

from knowledge_hub.api.models.database import drop_db, engine, init_db


def check_tables_exist():
    """Check if tables already exist in the database"""
    inspector = inspect(engine)
    tables = inspector.get_table_names()
    return len(tables) > 0


def main(argv=None):
    """Main initialization function"""
    parser = argparse.ArgumentParser(description="Create the knowledge hub tables")
    parser.add_argument(
        "--reset", action="store_true", help="drop existing tables before creating them"
    )
    args = parser.parse_args(argv)

    print("Knowledge Hub API - Database Initialization")
    print("=" * 50)

    if check_tables_exist():
        if not args.reset:
            print("\nTables already exist. Use --reset to drop and recreate them.")
            init_db()  # creates any table added since the last run
            return 0
        print("\nDropping existing tables...")
        drop_db()

    print("Creating tables...")
    init_db()

    # Show created tables
    inspector = inspect(engine)
    print("\nTable Schemas:")
    print("-" * 50)
    for table in inspector.get_table_names():
        print(f"\n{table}:")
        for col in inspector.get_columns(table):
            nullable = "NULL" if col["nullable"] else "NOT NULL"
            print(f"  - {col['name']}: {col['type']} {nullable}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
