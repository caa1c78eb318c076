from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from tablepos.core.database import get_db
from tablepos.deps import commit_or_conflict, to_http_exception
from tablepos.models.order import Order
from tablepos.schemas.pos import OrderOut, TableOut
from tablepos.services import catalog
from tablepos.services import orders as order_service
from tablepos.services.errors import OrderingError
from tablepos.services.table_state import TableView, build_table_link, describe_table

router = APIRouter(prefix="/api/tables", tags=["tables"])


class TableViewOut(BaseModel):
    table: TableOut
    display_status: str
    unserved_count: int = 0
    active_order: Optional[OrderOut] = None
    order_url: str


class TableCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=60)
    capacity: Optional[int] = Field(default=None, ge=1, le=50)


def _view_to_out(view: TableView) -> TableViewOut:
    return TableViewOut(
        table=TableOut.model_validate(view.table),
        display_status=view.display_status,
        unserved_count=view.unserved_count,
        active_order=OrderOut.model_validate(view.active_order) if view.active_order is not None else None,
        order_url=build_table_link(view.table),
    )


def _orders_for(db: Session, table_ids: list[str]) -> list[Order]:
    if not table_ids:
        return []
    return db.query(Order).filter(Order.table_id.in_(table_ids)).all()


@router.get("", response_model=List[TableViewOut])
def list_tables(db: Session = Depends(get_db)):
    tables = catalog.list_tables(db)
    orders = _orders_for(db, [table.id for table in tables])
    return [_view_to_out(describe_table(table, orders)) for table in tables]


@router.get("/{table_id}", response_model=TableViewOut)
def get_table(table_id: str, db: Session = Depends(get_db)):
    try:
        table = order_service.get_table(db, table_id)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    return _view_to_out(describe_table(table, _orders_for(db, [table.id])))


@router.post("", response_model=TableOut, status_code=201)
def create_table(body: TableCreate, db: Session = Depends(get_db)):
    try:
        table = catalog.create_table(db, body.name, body.capacity)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    db.refresh(table)
    return table


@router.delete("/{table_id}", response_model=TableOut)
def delete_table(table_id: str, db: Session = Depends(get_db)):
    try:
        table = catalog.delete_table(db, table_id)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    return table


@router.post("/{table_id}/reset", response_model=TableViewOut)
def reset_table(table_id: str, db: Session = Depends(get_db)):
    try:
        table = order_service.get_table(db, table_id)
        order_service.reset_table(db, table)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    db.refresh(table)
    return _view_to_out(describe_table(table, _orders_for(db, [table.id])))
