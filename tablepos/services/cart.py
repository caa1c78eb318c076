"""Merges menu selections into order lines and keeps the cached totals honest."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from tablepos.fsm.states import EDITABLE_STATUSES, OrderStatus
from tablepos.models.order_item import OrderItem
from tablepos.services.errors import InvalidTransition, NotFound, ValidationFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Totals:
    subtotal: int
    service_fee: int
    total_amount: int


def normalize_choice(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def line_key(dish_id: str, option: Optional[str], note: Optional[str]) -> tuple:
    return (dish_id, normalize_choice(option), normalize_choice(note))


def compute_service_fee(subtotal: int, config) -> int:
    if not config.is_service_fee_enabled:
        return 0
    fee = Decimal(subtotal) * Decimal(str(config.service_fee_rate))
    return int(fee.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_totals(items: Iterable, config) -> Totals:
    subtotal = sum(int(item.price) * int(item.quantity) for item in items)
    fee = compute_service_fee(subtotal, config)
    return Totals(subtotal=subtotal, service_fee=fee, total_amount=subtotal + fee)


def refresh_totals(order, config) -> Totals:
    totals = compute_totals(order.order_items, config)
    order.service_fee = totals.service_fee
    order.total_amount = totals.total_amount
    return totals


def find_line(order, dish_id: str, option: Optional[str], note: Optional[str]):
    key = line_key(dish_id, option, note)
    for item in order.order_items:
        if line_key(item.dish_id, item.selected_option, item.custom_note) == key:
            return item
    return None


def _validate_addition(dish, dish_id: str, option: Optional[str], note: Optional[str]) -> None:
    if dish is None:
        raise NotFound("Dish not found", dish_id=dish_id)
    if not dish.is_available:
        raise ValidationFailure("Dish is not available", dish_id=dish_id)
    options = list(dish.options or [])
    if options:
        if option is None:
            raise ValidationFailure("Choose an option for this dish", dish_id=dish_id)
        if option not in options:
            raise ValidationFailure("Unknown option for this dish", dish_id=dish_id, option=option)
    elif option is not None:
        raise ValidationFailure("This dish has no options", dish_id=dish_id)
    if note is not None and not dish.allow_custom_notes:
        raise ValidationFailure("This dish does not accept notes", dish_id=dish_id)


def apply_selection(
    order,
    dish_id: str,
    delta: int,
    config,
    *,
    dish=None,
    option: Optional[str] = None,
    note: Optional[str] = None,
):
    """Add or remove ``delta`` units of a (dish, option, note) line.

    A new line always starts at quantity 1 with the dish's current name and
    price. A line whose quantity drops to zero or below is removed. Returns
    the affected line, or ``None`` when the line no longer exists.
    """
    status = OrderStatus(order.status)
    if status not in EDITABLE_STATUSES:
        raise InvalidTransition(
            f"Cannot change items of an order in status {status.value}",
            status=status.value,
        )
    if delta == 0:
        raise ValidationFailure("Quantity change must not be zero")

    option = normalize_choice(option)
    note = normalize_choice(note)
    if delta > 0:
        _validate_addition(dish, dish_id, option, note)

    line = find_line(order, dish_id, option, note)
    if line is not None:
        line.quantity = int(line.quantity) + delta
        if line.quantity <= 0:
            order.order_items.remove(line)
            line = None
    elif delta > 0:
        line = OrderItem(
            dish_id=dish.id,
            name=dish.name,
            price=int(dish.price),
            quantity=1,
            selected_option=option,
            custom_note=note,
            is_served=False,
        )
        order.order_items.append(line)

    totals = refresh_totals(order, config)
    logger.info(
        "selection applied order_id=%s dish_id=%s delta=%s total=%s",
        order.id,
        dish_id,
        delta,
        totals.total_amount,
    )
    return line
