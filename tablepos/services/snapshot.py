"""Whole-store JSON export/import: tables, orders, dishes and config."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from tablepos.models._time import as_utc
from tablepos.models.dining_table import DiningTable
from tablepos.models.dish import Dish
from tablepos.models.order import Order
from tablepos.models.order_item import OrderItem
from tablepos.models.system_config import SYSTEM_CONFIG_ID, SystemConfig
from tablepos.schemas.pos import DishOut, OrderOut, StateSnapshot, SystemConfigOut, TableOut
from tablepos.services.catalog import get_config, list_dishes, list_tables
from tablepos.services.errors import ValidationFailure
from tablepos.services.orders import list_orders

logger = logging.getLogger(__name__)


def export_state(db: Session) -> dict[str, Any]:
    snapshot = StateSnapshot(
        tables=[TableOut.model_validate(table) for table in list_tables(db)],
        orders=[OrderOut.model_validate(order) for order in reversed(list_orders(db))],
        dishes=[DishOut.model_validate(dish) for dish in list_dishes(db)],
        config=SystemConfigOut.model_validate(get_config(db)),
    )
    return snapshot.model_dump(mode="json")


def _ensure_unique_ids(kind: str, ids: list[str]) -> None:
    seen: set[str] = set()
    for record_id in ids:
        if record_id in seen:
            raise ValidationFailure(f"Duplicate {kind} id in snapshot", record_id=record_id)
        seen.add(record_id)


def import_state(db: Session, payload: dict[str, Any]) -> dict[str, int]:
    """Replace all four collections with ``payload``."""
    snapshot = StateSnapshot.model_validate(payload)
    _ensure_unique_ids("table", [table.id for table in snapshot.tables])
    _ensure_unique_ids("dish", [dish.id for dish in snapshot.dishes])
    _ensure_unique_ids("order", [order.id for order in snapshot.orders])

    db.query(OrderItem).delete(synchronize_session=False)
    db.query(Order).delete(synchronize_session=False)
    db.query(DiningTable).delete(synchronize_session=False)
    db.query(Dish).delete(synchronize_session=False)
    db.expunge_all()

    for table in snapshot.tables:
        db.add(DiningTable(**table.model_dump(mode="json")))
    for dish in snapshot.dishes:
        db.add(Dish(**dish.model_dump()))
    for order in snapshot.orders:
        data = order.model_dump(exclude={"items", "version"})
        data["status"] = order.status.value
        data["created_at"] = as_utc(data["created_at"])
        record = Order(**data)
        record.order_items = [
            OrderItem(**item.model_dump(exclude={"id"})) for item in order.items
        ]
        db.add(record)

    if snapshot.config is not None:
        config = db.query(SystemConfig).filter(SystemConfig.id == SYSTEM_CONFIG_ID).first()
        if config is None:
            config = SystemConfig(id=SYSTEM_CONFIG_ID)
            db.add(config)
        for key, value in snapshot.config.model_dump().items():
            setattr(config, key, value)

    db.flush()
    counts = {
        "tables": len(snapshot.tables),
        "orders": len(snapshot.orders),
        "dishes": len(snapshot.dishes),
    }
    logger.info("state imported tables=%s orders=%s dishes=%s", counts["tables"], counts["orders"], counts["dishes"])
    return counts
