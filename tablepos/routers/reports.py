from __future__ import annotations

from typing import List, Optional
from zoneinfo import ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from tablepos.core.database import get_db
from tablepos.fsm.states import OrderStatus
from tablepos.models.order import Order
from tablepos.services.reports import TOP_DISHES_LIMIT, available_years, compute_report

router = APIRouter(prefix="/api/reports", tags=["reports"])


class MonthRevenueOut(BaseModel):
    month: int
    amount: int


class DishPopularityOut(BaseModel):
    dish_id: str
    name: str
    quantity: int


class RevenueReportOut(BaseModel):
    year: int
    yearly_total: int
    months: List[MonthRevenueOut]
    top_dishes: List[DishPopularityOut]
    available_years: List[int]


def _paid_orders(db: Session) -> list[Order]:
    return db.query(Order).filter(Order.status == OrderStatus.PAID.value).all()


@router.get("/{year}", response_model=RevenueReportOut)
def revenue_report(
    year: int = Path(..., ge=2000, le=9999),
    top: int = Query(TOP_DISHES_LIMIT, ge=1, le=50),
    tz: Optional[str] = Query(None, max_length=64),
    db: Session = Depends(get_db),
):
    orders = _paid_orders(db)
    try:
        report = compute_report(year, orders, tz_name=tz, top_n=top)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise HTTPException(status_code=400, detail="Unknown time zone") from exc
    return RevenueReportOut(
        year=report.year,
        yearly_total=report.yearly_total,
        months=[MonthRevenueOut(month=m.month, amount=m.amount) for m in report.months],
        top_dishes=[
            DishPopularityOut(dish_id=d.dish_id, name=d.name, quantity=d.quantity) for d in report.top_dishes
        ],
        available_years=available_years(orders, tz_name=tz),
    )
