"""Derives what a table shows from its manual flag and its order history.

The manual status lags behind customers: a diner can open a new order at a
table staff still has marked ``IDLE``. The newest non-cancelled order is taken
as the truth, except for the one case where staff already reset the table
and the newest order is the previous party's paid bill.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import urlencode

from tablepos.core.config import PUBLIC_ORDER_URL
from tablepos.fsm.states import OrderStatus, TableStatus
from tablepos.models._time import as_utc

DISPLAY_IDLE = "IDLE"
DISPLAY_ORDERING = "ORDERING"
DISPLAY_PREPARING = "PREPARING"
DISPLAY_SERVED = "SERVED"
DISPLAY_PAID = "PAID"
DISPLAY_PAID_UNSERVED = "PAID_UNSERVED"


@dataclass(frozen=True)
class TableView:
    table: object
    active_order: Optional[object]
    display_status: str
    unserved_count: int = 0


def _recency_key(order) -> tuple:
    return (as_utc(order.created_at), str(order.id))


def latest_open_candidate(table_id: str, orders: Iterable) -> Optional[object]:
    candidates = [
        order
        for order in orders
        if order.table_id == table_id and order.status != OrderStatus.CANCELLED.value
    ]
    if not candidates:
        return None
    return max(candidates, key=_recency_key)


def resolve_table_order(table, orders: Iterable) -> Optional[object]:
    order = latest_open_candidate(table.id, orders)
    if order is None:
        return None
    if table.status == TableStatus.IDLE.value and order.status == OrderStatus.PAID.value:
        return None
    return order


def unserved_count(order) -> int:
    return sum(1 for item in order.order_items if not item.is_served)


def describe_table(table, orders: Iterable) -> TableView:
    order = resolve_table_order(table, orders)
    if order is None:
        return TableView(table=table, active_order=None, display_status=DISPLAY_IDLE)

    pending = unserved_count(order)
    if order.status == OrderStatus.PAID.value:
        status = DISPLAY_PAID_UNSERVED if pending else DISPLAY_PAID
    # Deliberately not ORDERING for an accepted order: once submitted it
    # reads as PREPARING or SERVED even after staff reopen it
    elif order.status == OrderStatus.ORDERING.value and order.submitted_at is None:
        status = DISPLAY_ORDERING
    else:
        status = DISPLAY_PREPARING if pending else DISPLAY_SERVED
    return TableView(table=table, active_order=order, display_status=status, unserved_count=pending)


def build_table_link(table, base_url: str = PUBLIC_ORDER_URL) -> str:
    return f"{base_url}?{urlencode({'mode': 'customer', 'tableId': table.id})}"
