"""
Seed script: Insert the reference rows the article forms pick from.

Versions, categories, modules and tags are read-only through the API, so
a fresh database needs them loaded once. Existing rows are left alone.

Idempotent: safe to run multiple times.

Usage:
    python scripts/seed_reference_data.py
"""

import os
import sys

from sqlalchemy import text

VERSIONS = ["11.1.7", "11.2.0", "11.2.4", "12.0.0", "12.0.4", "12.1.0"]

CATEGORIES = [
    ("Installation", "Installing and upgrading Cognos Analytics"),
    ("Configuration", "Dispatcher, gateway and content store settings"),
    ("Security", "Namespaces, authentication and permissions"),
    ("Performance", "Tuning queries, XQE and the report service"),
    ("Troubleshooting", "Known errors and how to resolve them"),
]

MODULES = ["Reporting", "Dashboards", "Data Modules", "Administration", "Framework Manager"]

TAGS = ["XQE", "JDBC", "ODBC", "CAF", "Dispatcher", "Gateway", "Content Manager", "LDAP"]


def _insert_missing(conn, table, key, rows):
    """Insert rows whose key value is not present yet; return how many were added."""
    added = 0
    for row in rows:
        exists = conn.execute(
            text(f"SELECT 1 FROM {table} WHERE {key} = :value"), {"value": row[key]}
        ).first()
        if exists:
            continue
        columns = ", ".join(row)
        placeholders = ", ".join(f":{name}" for name in row)
        conn.execute(text(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"), row)
        added += 1
    return added


def seed():
    """Load versions, categories, modules and tags."""
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

    from knowledge_hub.api.models.database import engine, init_db  # noqa: E402

    init_db()

    plan = [
        ("versions", "label", [{"label": label} for label in VERSIONS]),
        (
            "categories",
            "name",
            [{"name": name, "description": desc} for name, desc in CATEGORIES],
        ),
        ("modules", "name", [{"name": name} for name in MODULES]),
        ("tags", "name", [{"name": name} for name in TAGS]),
    ]

    with engine.begin() as conn:
        for table, key, rows in plan:
            added = _insert_missing(conn, table, key, rows)
            print(f"  {table}: {added} added, {len(rows) - added} already present")


if __name__ == "__main__":
    seed()
