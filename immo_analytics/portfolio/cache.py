"""
Memoised portfolio analysis.

Cache key
---------
The key is the ordered concatenation of ``"{id}-{status}"`` pairs joined by
``"|"``. It is order-sensitive and status-sensitive but ignores notes and
every financial field. Changing a property's price without changing its
status therefore returns the previously cached (stale) analysis until the
cache is cleared. Portfolio mutations replace whole snapshots, so the key is
never computed against a half-updated collection.

Eviction
--------
``AnalysisCache()`` is unbounded by default: entries live for the whole
process. Long-running processes should pass ``max_entries`` (e.g. 50) to get
least-recently-used eviction. Observable results for any key still present
in the cache are identical either way. The process-wide ``DEFAULT_CACHE``
is bounded through ``configure_default_cache()`` at start-up.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Sequence
from typing import Optional

from immo_analytics.models.analysis import PortfolioAnalysisData
from immo_analytics.models.property import PortfolioProperty
from immo_analytics.portfolio.aggregator import analyze_portfolio

logger = logging.getLogger(__name__)


def portfolio_cache_key(properties: Sequence[PortfolioProperty]) -> str:
    """Fingerprint of a portfolio: ``"id1-status1|id2-status2|..."``."""
    return "|".join(f"{p.id}-{p.status}" for p in properties)


class AnalysisCache:
    """Mapping from portfolio fingerprint to analysis result.

    Attributes:
        max_entries: LRU capacity, or ``None`` for an unbounded cache.
        hits: Number of lookups answered from the cache.
        misses: Number of lookups that found nothing.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        self.max_entries = self._check_bound(max_entries)
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[str, PortfolioAnalysisData] = OrderedDict()

    @staticmethod
    def _check_bound(max_entries: Optional[int]) -> Optional[int]:
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be >= 1 or None, got {max_entries}.")
        return max_entries

    def resize(self, max_entries: Optional[int]) -> None:
        """Change the LRU capacity, evicting the oldest entries if needed."""
        self.max_entries = self._check_bound(max_entries)
        self._evict()

    def get(self, key: str) -> Optional[PortfolioAnalysisData]:
        result = self._entries.get(key)
        if result is None:
            self.misses += 1
            return None
        self.hits += 1
        if self.max_entries is not None:
            self._entries.move_to_end(key)
        return result

    def put(self, key: str, result: PortfolioAnalysisData) -> None:
        self._entries[key] = result
        if self.max_entries is None:
            return
        self._entries.move_to_end(key)
        self._evict()

    def _evict(self) -> None:
        if self.max_entries is None:
            return
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Analysis cache evicted key %r", evicted)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


class PortfolioAnalyzer:
    """Cached front-end to ``analyze_portfolio()``.

    On a hit the stored object is returned as-is (no recomputation); on a
    miss the analysis is computed, stored and returned.
    """

    def __init__(self, cache: Optional[AnalysisCache] = None) -> None:
        self.cache = cache if cache is not None else AnalysisCache()

    def analyze(self, properties: Sequence[PortfolioProperty]) -> PortfolioAnalysisData:
        key = portfolio_cache_key(properties)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Analysis cache hit (%d properties)", len(properties))
            return cached

        logger.debug("Analysis cache miss (%d properties) — computing", len(properties))
        result = analyze_portfolio(properties)
        self.cache.put(key, result)
        return result


# Process-wide default, shared by callers that do not bring their own cache.
DEFAULT_CACHE = AnalysisCache()
_default_analyzer = PortfolioAnalyzer(DEFAULT_CACHE)


def analyze(properties: Sequence[PortfolioProperty]) -> PortfolioAnalysisData:
    """Analyse ``properties`` through the process-wide cache."""
    return _default_analyzer.analyze(properties)


def configure_default_cache(max_entries: Optional[int]) -> None:
    """Apply the ``[portfolio] cache_max_entries`` bound to ``DEFAULT_CACHE``."""
    DEFAULT_CACHE.resize(max_entries)
