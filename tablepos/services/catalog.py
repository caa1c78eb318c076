"""Staff-side management of dishes, tables and restaurant settings."""

from __future__ import annotations

import logging
import re
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from tablepos.core.defaults import DEFAULT_CONFIG
from tablepos.fsm.states import TableStatus
from tablepos.models.dining_table import DiningTable
from tablepos.models.dish import Dish
from tablepos.models.system_config import SYSTEM_CONFIG_ID, SystemConfig
from tablepos.services.errors import NotFound, ValidationFailure

logger = logging.getLogger(__name__)

DEFAULT_TABLE_CAPACITY = 4
QR_CODE_PREFIX = "DG-"

CONFIG_FIELDS = (
    "restaurant_name",
    "is_gps_enabled",
    "gps_radius_m",
    "center_lat",
    "center_lng",
    "is_service_fee_enabled",
    "service_fee_rate",
)


def _dedupe(values: list[str]) -> list[str]:
    seen: list[str] = []
    for value in values:
        cleaned = str(value or "").strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


# Dishes


def get_dish(db: Session, dish_id: str) -> Dish:
    dish = db.query(Dish).filter(Dish.id == dish_id).first()
    if not dish:
        raise NotFound("Dish not found", dish_id=dish_id)
    return dish


def list_dishes(db: Session, *, only_available: bool = False) -> list[Dish]:
    query = db.query(Dish)
    if only_available:
        query = query.filter(Dish.is_available.is_(True))
    return query.order_by(Dish.category.asc(), Dish.created_at.asc(), Dish.id.asc()).all()


def dishes_by_category(dishes: list[Dish]) -> dict[str, list[Dish]]:
    grouped: dict[str, list[Dish]] = {}
    for dish in dishes:
        grouped.setdefault(dish.category, []).append(dish)
    return dict(sorted(grouped.items()))


def save_dish(db: Session, payload: dict[str, Any], dish_id: Optional[str] = None) -> Dish:
    """Create a dish, or replace every editable field of an existing one.

    Existing order lines keep the name and price they were captured with.
    """
    name = str(payload.get("name") or "").strip()
    category = str(payload.get("category") or "").strip()
    if not name:
        raise ValidationFailure("Dish name is required")
    if not category:
        raise ValidationFailure("Dish category is required")
    price = int(payload.get("price") or 0)
    if price < 0:
        raise ValidationFailure("Price must not be negative")

    if dish_id is None:
        new_id = payload.get("id") or f"d-{uuid4().hex[:10]}"
        if db.query(Dish.id).filter(Dish.id == new_id).first() is not None:
            raise ValidationFailure("Dish id already exists", dish_id=new_id)
        dish = Dish(id=new_id)
        db.add(dish)
    else:
        dish = get_dish(db, dish_id)

    dish.name = name
    dish.category = category
    dish.price = price
    dish.is_available = bool(payload.get("is_available", True))
    dish.options = _dedupe(list(payload.get("options") or []))
    dish.allow_custom_notes = bool(payload.get("allow_custom_notes", False))
    dish.image_url = payload.get("image_url") or None
    db.flush()
    logger.info("dish saved dish_id=%s price=%s", dish.id, dish.price)
    return dish


def set_dish_availability(db: Session, dish_id: str, is_available: bool) -> Dish:
    dish = get_dish(db, dish_id)
    dish.is_available = bool(is_available)
    db.flush()
    return dish


def delete_dish(db: Session, dish_id: str) -> Dish:
    dish = get_dish(db, dish_id)
    db.delete(dish)
    db.flush()
    logger.info("dish deleted dish_id=%s", dish_id)
    return dish


# Tables


def list_tables(db: Session) -> list[DiningTable]:
    return db.query(DiningTable).order_by(DiningTable.created_at.asc(), DiningTable.id.asc()).all()


def create_table(db: Session, name: str, capacity: Optional[int] = None) -> DiningTable:
    cleaned = str(name or "").strip()
    if not cleaned:
        raise ValidationFailure("Table name is required")
    capacity = DEFAULT_TABLE_CAPACITY if capacity is None else int(capacity)
    if capacity <= 0:
        raise ValidationFailure("Capacity must be positive")

    slug = re.sub(r"[^A-Za-z0-9]+", "-", cleaned).strip("-").upper() or uuid4().hex[:4].upper()
    table = DiningTable(
        id=f"t-{uuid4().hex[:10]}",
        name=cleaned,
        capacity=capacity,
        qr_code=f"{QR_CODE_PREFIX}{slug}",
        status=TableStatus.IDLE.value,
    )
    db.add(table)
    db.flush()
    logger.info("table created table_id=%s name=%s", table.id, table.name)
    return table


def delete_table(db: Session, table_id: str) -> DiningTable:
    table = db.query(DiningTable).filter(DiningTable.id == table_id).first()
    if not table:
        raise NotFound("Table not found", table_id=table_id)
    db.delete(table)
    db.flush()
    logger.info("table deleted table_id=%s", table_id)
    return table


# Settings


def get_config(db: Session) -> SystemConfig:
    config = db.query(SystemConfig).filter(SystemConfig.id == SYSTEM_CONFIG_ID).first()
    if config is None:
        config = SystemConfig(id=SYSTEM_CONFIG_ID, **DEFAULT_CONFIG)
        db.add(config)
        db.flush()
    return config


def update_config(db: Session, changes: dict[str, Any]) -> SystemConfig:
    config = get_config(db)
    updates = {key: value for key, value in changes.items() if key in CONFIG_FIELDS and value is not None}

    radius = updates.get("gps_radius_m", config.gps_radius_m)
    if radius is None or float(radius) <= 0:
        raise ValidationFailure("GPS radius must be positive")
    rate = updates.get("service_fee_rate", config.service_fee_rate)
    if rate is None or not 0 <= float(rate) <= 1:
        raise ValidationFailure("Service fee rate must be between 0 and 1")

    for key, value in updates.items():
        setattr(config, key, value)
    db.flush()
    logger.info("settings updated fields=%s", ",".join(sorted(updates)))
    return config
