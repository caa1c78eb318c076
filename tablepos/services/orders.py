from __future__ import annotations

import logging
import re
import secrets
from typing import Optional
from uuid import uuid4

from sqlalchemy import desc
from sqlalchemy.orm import Session

from tablepos.core.config import JOIN_CODE_MAX_ATTEMPTS
from tablepos.fsm import engine
from tablepos.fsm.states import OPEN_STATUSES, OrderEvent, OrderStatus, TableStatus
from tablepos.models._time import utcnow
from tablepos.models.dining_table import DiningTable
from tablepos.models.order import Order
from tablepos.models.order_item import OrderItem
from tablepos.services.errors import GeofenceBlocked, InvalidTransition, NotFound, ValidationFailure
from tablepos.services.geofence import PositionReport, check_geofence
from tablepos.services.order_events import (
    emit_order_created,
    emit_order_status_changed,
    emit_table_status_changed,
)
from tablepos.services.table_state import latest_open_candidate


logger = logging.getLogger(__name__)

JOIN_CODE_PATTERN = re.compile(r"^\d{4}$")
CODE_NOT_FOUND_MESSAGE = "code not found"


def _new_order_id() -> str:
    return "ORD-" + uuid4().hex[:6].upper()


def _random_code() -> str:
    return str(1000 + secrets.randbelow(9000))


def get_order(db: Session, order_id: str) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFound("Order not found", order_id=order_id)
    return order


def get_table(db: Session, table_id: str) -> DiningTable:
    table = db.query(DiningTable).filter(DiningTable.id == table_id).first()
    if not table:
        raise NotFound("Table not found", table_id=table_id)
    return table


def list_orders(db: Session) -> list[Order]:
    return db.query(Order).order_by(desc(Order.created_at), desc(Order.id)).all()


def generate_join_code(db: Session) -> str:
    """Pick a code no open order is using; collisions with history are fine."""
    open_codes = {
        row[0]
        for row in db.query(Order.random_code)
        .filter(Order.status.in_([status.value for status in OPEN_STATUSES]))
        .all()
    }
    code = _random_code()
    for _ in range(max(JOIN_CODE_MAX_ATTEMPTS, 1)):
        if code not in open_codes:
            return code
        code = _random_code()
    logger.warning("join code space crowded, reusing code=%s", code)
    return code


def start_order(db: Session, table_id: str) -> tuple[Order, bool]:
    """Return the table's open order, creating one if there is none.

    The boolean tells whether a new order was created.
    """
    table = get_table(db, table_id)
    orders = db.query(Order).filter(Order.table_id == table.id).all()
    current = latest_open_candidate(table.id, orders)
    if current is not None and OrderStatus(current.status) in OPEN_STATUSES:
        return current, False

    order = Order(
        id=_new_order_id(),
        table_id=table.id,
        table_name=table.name,
        random_code=generate_join_code(db),
        status=OrderStatus.ORDERING.value,
        service_fee=0,
        total_amount=0,
        created_at=utcnow(),
    )
    db.add(order)
    db.flush()
    logger.info("order started order_id=%s table_id=%s", order.id, table.id)
    emit_order_created(order)
    return order, True


def join_by_code(db: Session, code: str) -> Order:
    code = (code or "").strip()
    if not JOIN_CODE_PATTERN.match(code):
        raise ValidationFailure("Join code must be 4 digits")
    order = (
        db.query(Order)
        .filter(Order.random_code == code, Order.status != OrderStatus.CANCELLED.value)
        .order_by(desc(Order.created_at), desc(Order.id))
        .first()
    )
    if not order:
        logger.info("join code rejected")
        raise ValidationFailure(CODE_NOT_FOUND_MESSAGE)
    return order


def _set_table_status(db: Session, table_id: str, status: TableStatus) -> Optional[DiningTable]:
    table = db.query(DiningTable).filter(DiningTable.id == table_id).first()
    if table is None:
        # the table may have been removed while the order was open
        logger.warning("table missing for status update table_id=%s", table_id)
        return None
    previous_status = table.status
    table.status = status.value
    emit_table_status_changed(table, previous_status)
    return table


def _fire(db: Session, order: Order, event: OrderEvent) -> Order:
    previous_status = order.status
    transition = engine.fire(order, event)
    if transition.table_status is not None:
        _set_table_status(db, order.table_id, transition.table_status)
    db.flush()
    emit_order_status_changed(order, previous_status)
    return order


def submit_order(db: Session, order: Order, config, report: Optional[PositionReport] = None) -> Order:
    engine.ensure_can_fire(order, OrderEvent.SUBMIT)
    if not order.order_items:
        raise ValidationFailure("Add at least one item before submitting", order_id=order.id)

    result = check_geofence(config, report)
    if not result.allowed:
        logger.warning(
            "submission blocked order_id=%s reason=%s distance_m=%s",
            order.id,
            result.reason,
            result.distance_m,
        )
        raise GeofenceBlocked(
            result.message or "Submission blocked",
            reason=result.reason or "unknown",
            distance_m=round(result.distance_m) if result.distance_m is not None else None,
            radius_m=config.gps_radius_m,
        )

    if order.submitted_at is None:
        order.submitted_at = utcnow()
    return _fire(db, order, OrderEvent.SUBMIT)


def accept_for_preparation(db: Session, order: Order) -> Order:
    return _fire(db, order, OrderEvent.ACCEPT)


def check_in_order(db: Session, order: Order) -> Order:
    return _fire(db, order, OrderEvent.CHECK_IN)


def settle_order(db: Session, order: Order) -> Order:
    if order.status == OrderStatus.PAID.value:
        logger.info("order already settled order_id=%s", order.id)
        return order
    engine.ensure_can_fire(order, OrderEvent.SETTLE)
    order.paid_at = utcnow()
    return _fire(db, order, OrderEvent.SETTLE)


def cancel_order(db: Session, order: Order) -> Order:
    return _fire(db, order, OrderEvent.CANCEL)


def reset_table(db: Session, table: DiningTable) -> DiningTable:
    """Mark the table idle. Its orders are left exactly as they are."""
    previous_status = table.status
    table.status = TableStatus.IDLE.value
    db.flush()
    logger.info("table reset table_id=%s previous=%s", table.id, previous_status)
    emit_table_status_changed(table, previous_status)
    return table


def toggle_item_served(db: Session, order: Order, item_id: int) -> OrderItem:
    if order.submitted_at is None:
        raise InvalidTransition("Items can be served only after the order is submitted", order_id=order.id)
    if order.status == OrderStatus.CANCELLED.value:
        raise InvalidTransition("Cannot serve items of a cancelled order", order_id=order.id)
    item = next((line for line in order.order_items if line.id == item_id), None)
    if item is None:
        raise NotFound("Order item not found", order_id=order.id, item_id=item_id)
    item.is_served = not item.is_served
    db.flush()
    logger.info("item served toggled order_id=%s item_id=%s served=%s", order.id, item.id, item.is_served)
    return item
