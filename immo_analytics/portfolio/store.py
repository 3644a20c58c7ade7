"""
Portfolio store: the mutable portfolio behind the mutation API.

Copy-on-write
-------------
The store holds one immutable snapshot (a tuple of frozen
``PortfolioProperty``). Every mutation builds a complete new tuple and then
publishes it with a single reference assignment. Readers that grabbed the
previous snapshot keep a consistent view; reads never take the lock.

Writers are serialised by a ``threading.RLock`` so concurrent mutations from
a multi-threaded host cannot lose updates. Events are published before the
lock is released, so listeners see changes in snapshot order. The lock is
re-entrant: a listener may call back into the store on the same thread.

Mutation API
------------
    add_to_portfolio(property)   no-op (logged) if the id is already present
    remove_from_portfolio(id)
    update_status(id, status)
    add_note(id, text)

Each returns the snapshot current after the call. Unknown ids leave the
snapshot unchanged.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from datetime import datetime, timezone
from typing import Optional

from immo_analytics.models.property import PortfolioProperty, Property
from immo_analytics.portfolio.events import EventBus, PortfolioEvent
from immo_analytics.taxonomy.property_taxonomy import PortfolioEventType, PortfolioStatus

logger = logging.getLogger(__name__)

PortfolioSnapshot = tuple[PortfolioProperty, ...]


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class PortfolioStore:
    """Owner of the current portfolio snapshot.

    Args:
        initial: Entries to start with (insertion order is display order).
        event_bus: Optional bus that receives a ``PortfolioEvent`` per change.
        clock: Callable returning the ``added_at`` timestamp for new entries.
    """

    def __init__(
        self,
        initial: Iterable[PortfolioProperty] = (),
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        entries = tuple(initial)
        ids = [p.id for p in entries]
        if len(ids) != len(set(ids)):
            raise ValueError("Initial portfolio contains duplicate property ids.")
        self._snapshot: PortfolioSnapshot = entries
        self._write_lock = threading.RLock()
        self._bus = event_bus
        self._clock = clock

    # ── Reads (lock-free) ────────────────────────────────────────────────────

    @property
    def snapshot(self) -> PortfolioSnapshot:
        return self._snapshot

    def get(self, property_id: str) -> Optional[PortfolioProperty]:
        return next((p for p in self._snapshot if p.id == property_id), None)

    def __contains__(self, property_id: object) -> bool:
        return any(p.id == property_id for p in self._snapshot)

    def __len__(self) -> int:
        return len(self._snapshot)

    def __iter__(self) -> Iterator[PortfolioProperty]:
        return iter(self._snapshot)

    # ── Mutations ────────────────────────────────────────────────────────────

    def add_to_portfolio(
        self,
        prop: Property,
        status: PortfolioStatus = PortfolioStatus.ACTIVE,
    ) -> PortfolioSnapshot:
        """Append ``prop`` as a new entry unless its id is already held."""
        with self._write_lock:
            current = self._snapshot
            if any(p.id == prop.id for p in current):
                logger.info("Property %s (%s) already in portfolio", prop.id, prop.title)
                return current
            entry = PortfolioProperty.from_property(prop, status=status, added_at=self._clock())
            self._snapshot = (*current, entry)
            logger.debug("Added property %s to portfolio (%d entries)", prop.id, len(self._snapshot))
            self._announce(entry, PortfolioEventType.ADD)
            return self._snapshot

    def remove_from_portfolio(self, property_id: str) -> PortfolioSnapshot:
        with self._write_lock:
            current = self._snapshot
            removed = next((p for p in current if p.id == property_id), None)
            if removed is None:
                logger.debug("Remove ignored: property %s not in portfolio", property_id)
                return current
            self._snapshot = tuple(p for p in current if p.id != property_id)
            self._announce(removed, PortfolioEventType.REMOVE)
            return self._snapshot

    def update_status(self, property_id: str, status: PortfolioStatus) -> PortfolioSnapshot:
        return self._replace(property_id, {"status": PortfolioStatus(status)})

    def add_note(self, property_id: str, text: str) -> PortfolioSnapshot:
        return self._replace(property_id, {"notes": text})

    # ── Internals ────────────────────────────────────────────────────────────

    def _replace(self, property_id: str, update: dict) -> PortfolioSnapshot:
        with self._write_lock:
            current = self._snapshot
            updated: Optional[PortfolioProperty] = None
            entries: list[PortfolioProperty] = []
            for p in current:
                if p.id == property_id:
                    updated = p.model_copy(update=update)
                    entries.append(updated)
                else:
                    entries.append(p)
            if updated is None:
                logger.debug("Update ignored: property %s not in portfolio", property_id)
                return current
            self._snapshot = tuple(entries)
            self._announce(updated, PortfolioEventType.UPDATE)
            return self._snapshot

    def _announce(self, prop: PortfolioProperty, event_type: PortfolioEventType) -> None:
        # Called with the writer lock held.
        if self._bus is not None:
            self._bus.publish(PortfolioEvent(property=prop, type=event_type))
