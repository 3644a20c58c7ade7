"""
Portfolio change notifications.

``EventBus`` is a plain publish/subscribe subject. It is created and owned by
the application's composition root and handed to the objects that need it;
there is no module-level instance.

``NotificationFeed`` subscribes to a bus and keeps the most recent portfolio
events (newest first) for the toast area of the UI.

Usage::

    bus  = EventBus()
    feed = NotificationFeed(bus, max_items=5)
    unsubscribe = bus.subscribe(lambda ev: print(ev.type, ev.property.id))
    store = PortfolioStore(event_bus=bus)
    store.add_to_portfolio(prop)
    unsubscribe()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from immo_analytics.models.property import Property
from immo_analytics.taxonomy.property_taxonomy import PortfolioEventType

logger = logging.getLogger(__name__)


class PortfolioEvent(BaseModel):
    """A single portfolio change announcement.

    Attributes:
        id: Random short identifier, used to dismiss a notification.
        property: The property that was added, removed or updated.
        type: Kind of change.
        timestamp: UTC time of publication.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex[:8])
    property: Property
    type: PortfolioEventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))


Listener = Callable[[PortfolioEvent], None]


class EventBus:
    """Synchronous pub/sub subject for ``PortfolioEvent``.

    Listeners are called in subscription order on the publishing thread.
    A failing listener is logged and does not prevent delivery to the rest.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; return a callable that unregisters it."""
        with self._lock:
            self._listeners = [*self._listeners, listener]

        def unsubscribe() -> None:
            with self._lock:
                self._listeners = [l for l in self._listeners if l is not listener]

        return unsubscribe

    def publish(self, event: PortfolioEvent) -> None:
        listeners = self._listeners
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Portfolio event listener failed for %s event on %s",
                    event.type, event.property.id,
                )

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


class NotificationFeed:
    """Most recent portfolio events, newest first."""

    def __init__(self, bus: EventBus, max_items: int = 5) -> None:
        if max_items < 1:
            raise ValueError(f"max_items must be >= 1, got {max_items}.")
        self.max_items = max_items
        self._items: tuple[PortfolioEvent, ...] = ()
        self._lock = threading.Lock()
        self._unsubscribe = bus.subscribe(self._on_event)

    def _on_event(self, event: PortfolioEvent) -> None:
        with self._lock:
            self._items = (event, *self._items)[: self.max_items]

    @property
    def items(self) -> list[PortfolioEvent]:
        return list(self._items)

    def dismiss(self, event_id: str) -> None:
        with self._lock:
            self._items = tuple(e for e in self._items if e.id != event_id)

    def close(self) -> None:
        """Stop listening to the bus."""
        self._unsubscribe()
