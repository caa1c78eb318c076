from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from tablepos.core.database import get_db
from tablepos.deps import commit_or_conflict, get_system_config, to_http_exception
from tablepos.fsm.engine import allowed_events
from tablepos.models.order import Order
from tablepos.models.system_config import SystemConfig
from tablepos.schemas.pos import OrderItemOut, OrderOut
from tablepos.services import orders as order_service
from tablepos.services.cart import apply_selection
from tablepos.services.catalog import get_dish
from tablepos.services.errors import NotFound, OrderingError
from tablepos.services.geofence import Position, PositionReport

router = APIRouter(prefix="/api", tags=["orders"])


class OrderDetail(OrderOut):
    allowed_actions: List[str] = Field(default_factory=list)


class JoinRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=8)


class SelectionRequest(BaseModel):
    dish_id: str
    delta: int = Field(..., ge=-99, le=99)
    option: Optional[str] = None
    note: Optional[str] = Field(default=None, max_length=200)


class PositionIn(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class SubmitRequest(BaseModel):
    position: Optional[PositionIn] = None
    # reported by the browser when it could not provide a position
    error: Optional[str] = Field(default=None, pattern="^(permission_denied|unavailable|timeout)$")


def _order_detail(order: Order) -> OrderDetail:
    detail = OrderDetail.model_validate(order)
    detail.allowed_actions = [event.value for event in allowed_events(order)]
    return detail


def _load_order(db: Session, order_id: str) -> Order:
    try:
        return order_service.get_order(db, order_id)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc


@router.get("/orders", response_model=List[OrderOut])
def list_orders(db: Session = Depends(get_db)):
    return order_service.list_orders(db)


@router.get("/orders/{order_id}", response_model=OrderDetail)
def get_order(order_id: str, db: Session = Depends(get_db)):
    return _order_detail(_load_order(db, order_id))


@router.post("/tables/{table_id}/orders", response_model=OrderDetail)
def start_order(table_id: str, response: Response, db: Session = Depends(get_db)):
    try:
        order, created = order_service.start_order(db, table_id)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    db.refresh(order)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return _order_detail(order)


@router.post("/orders/join", response_model=OrderDetail)
def join_order(body: JoinRequest, db: Session = Depends(get_db)):
    try:
        order = order_service.join_by_code(db, body.code)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    return _order_detail(order)


@router.post("/orders/{order_id}/items", response_model=OrderDetail)
def change_items(
    order_id: str,
    body: SelectionRequest,
    db: Session = Depends(get_db),
    config: SystemConfig = Depends(get_system_config),
):
    order = _load_order(db, order_id)
    try:
        try:
            dish = get_dish(db, body.dish_id)
        except NotFound:
            # lines of a deleted dish can still be removed
            if body.delta > 0:
                raise
            dish = None
        apply_selection(order, body.dish_id, body.delta, config, dish=dish, option=body.option, note=body.note)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    db.refresh(order)
    return _order_detail(order)


@router.post("/orders/{order_id}/submit", response_model=OrderDetail)
def submit_order(
    order_id: str,
    body: SubmitRequest,
    db: Session = Depends(get_db),
    config: SystemConfig = Depends(get_system_config),
):
    order = _load_order(db, order_id)
    report = None
    if body.position is not None or body.error is not None:
        report = PositionReport(
            position=Position(lat=body.position.lat, lng=body.position.lng) if body.position else None,
            error=body.error,
        )
    try:
        order_service.submit_order(db, order, config, report)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    db.refresh(order)
    return _order_detail(order)


def _transition(db: Session, order_id: str, action) -> OrderDetail:
    order = _load_order(db, order_id)
    try:
        action(db, order)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    db.refresh(order)
    return _order_detail(order)


@router.post("/orders/{order_id}/accept", response_model=OrderDetail)
def accept_order(order_id: str, db: Session = Depends(get_db)):
    return _transition(db, order_id, order_service.accept_for_preparation)


@router.post("/orders/{order_id}/check-in", response_model=OrderDetail)
def check_in_order(order_id: str, db: Session = Depends(get_db)):
    return _transition(db, order_id, order_service.check_in_order)


@router.post("/orders/{order_id}/settle", response_model=OrderDetail)
def settle_order(order_id: str, db: Session = Depends(get_db)):
    return _transition(db, order_id, order_service.settle_order)


@router.post("/orders/{order_id}/cancel", response_model=OrderDetail)
def cancel_order(order_id: str, db: Session = Depends(get_db)):
    return _transition(db, order_id, order_service.cancel_order)


@router.patch("/orders/{order_id}/items/{item_id}/served", response_model=OrderItemOut)
def toggle_served(order_id: str, item_id: int, db: Session = Depends(get_db)):
    order = _load_order(db, order_id)
    try:
        item = order_service.toggle_item_served(db, order, item_id)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    db.refresh(item)
    return item
