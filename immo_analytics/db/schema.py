"""
SQLite schema DDL for the preferences database.

The only persisted state is a small key/value table holding UI preferences
(onboarding flag, recent filter presets). The portfolio itself is never
persisted.

All statements use ``IF NOT EXISTS`` so ``apply_schema()`` is idempotent.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

_DDL_USER_PREFERENCES = """
CREATE TABLE IF NOT EXISTS user_preferences (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    updated_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);
"""

_ALL_DDL = [_DDL_USER_PREFERENCES]

ALL_TABLE_NAMES = ["user_preferences"]


def apply_schema(conn: sqlite3.Connection) -> None:
    """Apply all DDL statements to ``conn``. Safe to call repeatedly."""
    for ddl in _ALL_DDL:
        conn.execute(ddl)
    conn.commit()
    logger.debug("Schema applied: %d table(s) created/verified.", len(ALL_TABLE_NAMES))


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    """Return table names present in the database, sorted alphabetically."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name;"
    ).fetchall()
    return [row["name"] for row in rows]
