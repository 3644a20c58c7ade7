"""
User preferences on top of the key/value repository.

Two values are persisted under fixed keys:

    hasSeenOnboarding    "true" once the first-run tour was completed or skipped
    recentFilterPresets  JSON list of the most recent ``FilterPreset`` objects

Absence of either key means defaults (onboarding not seen, no presets). A
corrupt presets value is logged and treated as absent; it is overwritten on
the next ``remember_filter_preset()``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Callable

from pydantic import TypeAdapter, ValidationError

from immo_analytics.db.repositories.preferences_repo import PreferencesRepository
from immo_analytics.models.filters import FilterPreset, SearchFilters

logger = logging.getLogger(__name__)

ONBOARDING_KEY = "hasSeenOnboarding"
FILTER_PRESETS_KEY = "recentFilterPresets"
DEFAULT_PRESET_NAME = "Last search"

_PRESET_LIST = TypeAdapter(list[FilterPreset])


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class PreferencesStore:
    """Typed access to onboarding and filter-preset preferences.

    Args:
        repo: Repository bound to an open connection.
        max_recent_presets: How many presets to keep (newest first).
        clock: Source of ``last_used`` timestamps and preset ids.
    """

    def __init__(
        self,
        repo: PreferencesRepository,
        max_recent_presets: int = 5,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if max_recent_presets < 1:
            raise ValueError(f"max_recent_presets must be >= 1, got {max_recent_presets}.")
        self.repo = repo
        self.max_recent_presets = max_recent_presets
        self._clock = clock

    # ── Onboarding ───────────────────────────────────────────────────────────

    def has_seen_onboarding(self) -> bool:
        return self.repo.get_raw(ONBOARDING_KEY) == "true"

    def mark_onboarding_seen(self) -> None:
        self.repo.set_raw(ONBOARDING_KEY, "true")

    def reset_onboarding(self) -> None:
        self.repo.delete(ONBOARDING_KEY)

    # ── Filter presets ───────────────────────────────────────────────────────

    def recent_filter_presets(self) -> list[FilterPreset]:
        """Stored presets, newest first. ``[]`` when missing or unreadable."""
        raw = self.repo.get_raw(FILTER_PRESETS_KEY)
        if raw is None:
            return []
        try:
            return _PRESET_LIST.validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Ignoring unreadable %s preference (%d error(s))",
                FILTER_PRESETS_KEY, exc.error_count(),
            )
            return []

    def remember_filter_preset(
        self,
        filters: SearchFilters,
        name: str = DEFAULT_PRESET_NAME,
    ) -> list[FilterPreset]:
        """Put ``filters`` first in the recent list, trimming to capacity.

        Returns:
            The updated preset list as persisted.
        """
        now = self._clock()
        preset = FilterPreset(
            id=str(int(now.timestamp() * 1000)),
            name=name,
            filters=filters,
            last_used=now,
        )
        presets = [preset, *self.recent_filter_presets()][: self.max_recent_presets]
        payload = json.dumps([p.model_dump(mode="json") for p in presets])
        self.repo.set_raw(FILTER_PRESETS_KEY, payload)
        logger.debug("Stored filter preset %s (%d kept)", preset.id, len(presets))
        return presets
