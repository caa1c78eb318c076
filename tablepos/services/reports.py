"""Revenue and dish popularity, derived from the order collection on demand."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from tablepos.core.config import REPORT_TIMEZONE
from tablepos.fsm.states import OrderStatus
from tablepos.models._time import as_utc

TOP_DISHES_LIMIT = 5


@dataclass(frozen=True)
class MonthRevenue:
    month: int
    amount: int


@dataclass(frozen=True)
class DishPopularity:
    dish_id: str
    name: str
    quantity: int


@dataclass(frozen=True)
class RevenueReport:
    year: int
    yearly_total: int
    months: list[MonthRevenue] = field(default_factory=list)
    top_dishes: list[DishPopularity] = field(default_factory=list)


def _zone(tz_name: Optional[str]) -> ZoneInfo:
    return ZoneInfo(tz_name or REPORT_TIMEZONE)


def _local(value: datetime, zone: ZoneInfo) -> datetime:
    return as_utc(value).astimezone(zone)


def paid_orders(orders: Iterable) -> list:
    paid = [order for order in orders if order.status == OrderStatus.PAID.value]
    # oldest first so popularity ties keep first-encountered order
    return sorted(paid, key=lambda order: (as_utc(order.created_at), str(order.id)))


def monthly_revenue(orders: list, year: int, zone: ZoneInfo) -> dict[int, int]:
    buckets = {month: 0 for month in range(1, 13)}
    for order in orders:
        created = _local(order.created_at, zone)
        if created.year == year:
            buckets[created.month] += int(order.total_amount or 0)
    return buckets


def top_dishes(orders: list, limit: int = TOP_DISHES_LIMIT) -> list[DishPopularity]:
    stats: dict[str, dict] = {}
    for order in orders:
        for item in order.order_items:
            entry = stats.setdefault(item.dish_id, {"name": item.name, "quantity": 0})
            entry["quantity"] += int(item.quantity)
    ranked = sorted(stats.items(), key=lambda pair: pair[1]["quantity"], reverse=True)
    return [
        DishPopularity(dish_id=dish_id, name=values["name"], quantity=values["quantity"])
        for dish_id, values in ranked[:limit]
    ]


def compute_report(
    year: int,
    orders: Iterable,
    *,
    now: Optional[datetime] = None,
    tz_name: Optional[str] = None,
    top_n: int = TOP_DISHES_LIMIT,
) -> RevenueReport:
    zone = _zone(tz_name)
    current = _local(now or datetime.now(timezone.utc), zone)
    paid = paid_orders(orders)

    buckets = monthly_revenue(paid, year, zone)
    months = [
        MonthRevenue(month=month, amount=amount)
        for month, amount in sorted(buckets.items(), reverse=True)
        if amount > 0 or month == current.month
    ]
    return RevenueReport(
        year=year,
        yearly_total=sum(buckets.values()),
        months=months,
        top_dishes=top_dishes(paid, limit=top_n),
    )


def available_years(orders: Iterable, *, now: Optional[datetime] = None, tz_name: Optional[str] = None) -> list[int]:
    zone = _zone(tz_name)
    current_year = _local(now or datetime.now(timezone.utc), zone).year
    paid = paid_orders(orders)
    if not paid:
        return [current_year]
    first_year = min(_local(paid[0].created_at, zone).year, current_year)
    return list(range(current_year, first_year - 1, -1))
