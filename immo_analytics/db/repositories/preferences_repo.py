"""Repository for the ``user_preferences`` key/value table."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from immo_analytics.db.repositories.base import BaseRepository


class PreferencesRepository(BaseRepository):
    """Raw string access to persisted preferences."""

    def get_raw(self, key: str) -> Optional[str]:
        row = self.fetchone("SELECT value FROM user_preferences WHERE key = ?;", (key,))
        return None if row is None else row["value"]

    def set_raw(self, key: str, value: str) -> None:
        """Insert or overwrite ``key``."""
        self.execute(
            """
            INSERT INTO user_preferences (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value      = excluded.value,
                updated_at = excluded.updated_at;
            """,
            (key, value, datetime.now(tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")),
        )

    def delete(self, key: str) -> bool:
        """Remove ``key``; return ``True`` if a row was deleted."""
        cur = self.execute("DELETE FROM user_preferences WHERE key = ?;", (key,))
        return cur.rowcount > 0
