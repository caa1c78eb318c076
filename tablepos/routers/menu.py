from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from tablepos.core.database import get_db
from tablepos.deps import commit_or_conflict, to_http_exception
from tablepos.schemas.pos import DishOut
from tablepos.services import catalog
from tablepos.services.errors import OrderingError

router = APIRouter(prefix="/api/dishes", tags=["menu"])


class DishIn(BaseModel):
    id: Optional[str] = Field(default=None, max_length=64)
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    price: int = Field(..., ge=0)
    is_available: bool = True
    options: List[str] = Field(default_factory=list)
    allow_custom_notes: bool = False
    image_url: Optional[str] = None


class AvailabilityUpdate(BaseModel):
    is_available: bool


@router.get("", response_model=List[DishOut])
def list_dishes(available: bool = Query(False), db: Session = Depends(get_db)):
    return catalog.list_dishes(db, only_available=available)


@router.get("/by-category", response_model=Dict[str, List[DishOut]])
def list_dishes_by_category(available: bool = Query(True), db: Session = Depends(get_db)):
    return catalog.dishes_by_category(catalog.list_dishes(db, only_available=available))


@router.post("", response_model=DishOut, status_code=201)
def create_dish(body: DishIn, db: Session = Depends(get_db)):
    try:
        dish = catalog.save_dish(db, body.model_dump())
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    db.refresh(dish)
    return dish


@router.put("/{dish_id}", response_model=DishOut)
def update_dish(dish_id: str, body: DishIn, db: Session = Depends(get_db)):
    try:
        dish = catalog.save_dish(db, body.model_dump(exclude={"id"}), dish_id=dish_id)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    db.refresh(dish)
    return dish


@router.patch("/{dish_id}/availability", response_model=DishOut)
def update_availability(dish_id: str, body: AvailabilityUpdate, db: Session = Depends(get_db)):
    try:
        dish = catalog.set_dish_availability(db, dish_id, body.is_available)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    db.refresh(dish)
    return dish


@router.delete("/{dish_id}", response_model=DishOut)
def delete_dish(dish_id: str, db: Session = Depends(get_db)):
    try:
        dish = catalog.delete_dish(db, dish_id)
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    return dish
