from __future__ import annotations

from typing import Optional

from tablepos.fsm.states import OrderStatus
from tablepos.services.event_bus import (
    ORDER_CREATED,
    ORDER_PAID,
    ORDER_STATUS_CHANGED,
    TABLE_STATUS_CHANGED,
    event_bus,
)


def _changed(previous: Optional[str], current: Optional[str]) -> bool:
    return (previous or "") != (current or "")


def build_order_payload(order, previous_status: Optional[str] = None) -> dict:
    return {
        "order_id": order.id,
        "table_id": order.table_id,
        "table_name": order.table_name,
        "status": order.status,
        "previous_status": previous_status,
        "total_amount": int(order.total_amount or 0),
        "item_count": sum(int(item.quantity) for item in order.order_items),
    }


def emit_order_created(order) -> None:
    event_bus.emit(ORDER_CREATED, build_order_payload(order))


def emit_order_status_changed(order, previous_status: Optional[str]) -> None:
    if not _changed(previous_status, order.status):
        return
    payload = build_order_payload(order, previous_status=previous_status)
    event_bus.emit(ORDER_STATUS_CHANGED, payload)
    if order.status == OrderStatus.PAID.value:
        event_bus.emit(ORDER_PAID, payload)


def emit_table_status_changed(table, previous_status: Optional[str]) -> None:
    if not _changed(previous_status, table.status):
        return
    event_bus.emit(
        TABLE_STATUS_CHANGED,
        {
            "table_id": table.id,
            "table_name": table.name,
            "status": table.status,
            "previous_status": previous_status,
        },
    )
