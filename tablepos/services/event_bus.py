"""Synchronous in-process notifications for order and table changes.

Handlers run inside the request that caused the change, after the service
has flushed it. A failing handler is logged and never undoes the change.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

ORDER_CREATED = "order.created"
ORDER_STATUS_CHANGED = "order.status.changed"
ORDER_PAID = "order.paid"
TABLE_STATUS_CHANGED = "table.status.changed"

KNOWN_EVENTS = frozenset({ORDER_CREATED, ORDER_STATUS_CHANGED, ORDER_PAID, TABLE_STATUS_CHANGED})

Handler = Callable[[dict[str, Any]], None]

logger = logging.getLogger(__name__)


class EventBus:
    def __init__(self) -> None:
        self._subscribers: DefaultDict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: Handler) -> None:
        if event_name not in KNOWN_EVENTS:
            raise ValueError(f"Unknown event {event_name!r}")
        if handler not in self._subscribers[event_name]:
            self._subscribers[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: Handler) -> None:
        subscribers = self._subscribers.get(event_name, [])
        if handler in subscribers:
            subscribers.remove(handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> int:
        """Deliver ``payload`` to every subscriber; returns how many succeeded."""
        delivered = 0
        for handler in list(self._subscribers.get(event_name, ())):
            try:
                handler(payload)
            except Exception:
                logger.exception(
                    "event handler failed",
                    extra={"event": event_name, "order_id": payload.get("order_id")},
                )
                continue
            delivered += 1
        if not delivered:
            logger.debug("no handler took %s", event_name)
        return delivered


event_bus = EventBus()
