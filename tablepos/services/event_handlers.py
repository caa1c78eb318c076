"""Log lines for the event stream; importing this module subscribes them."""

from __future__ import annotations

import logging

from tablepos.services.event_bus import (
    ORDER_CREATED,
    ORDER_PAID,
    ORDER_STATUS_CHANGED,
    TABLE_STATUS_CHANGED,
    event_bus,
)

logger = logging.getLogger(__name__)


def _order_extra(payload: dict, event: str) -> dict:
    return {"order_id": payload["order_id"], "table_id": payload["table_id"], "event": event}


def handle_order_created(payload: dict) -> None:
    logger.info("order opened at %s", payload.get("table_name"), extra=_order_extra(payload, ORDER_CREATED))


def handle_order_status_changed(payload: dict) -> None:
    logger.info(
        "order %s -> %s items=%s",
        payload.get("previous_status"),
        payload.get("status"),
        payload.get("item_count"),
        extra=_order_extra(payload, ORDER_STATUS_CHANGED),
    )


def handle_order_paid(payload: dict) -> None:
    logger.info("order paid total=%s", payload.get("total_amount", 0), extra=_order_extra(payload, ORDER_PAID))


def handle_table_status_changed(payload: dict) -> None:
    logger.info(
        "table %s %s -> %s",
        payload.get("table_name"),
        payload.get("previous_status"),
        payload.get("status"),
        extra={"table_id": payload["table_id"], "event": TABLE_STATUS_CHANGED},
    )


event_bus.subscribe(ORDER_CREATED, handle_order_created)
event_bus.subscribe(ORDER_STATUS_CHANGED, handle_order_status_changed)
event_bus.subscribe(ORDER_PAID, handle_order_paid)
event_bus.subscribe(TABLE_STATUS_CHANGED, handle_table_status_changed)
