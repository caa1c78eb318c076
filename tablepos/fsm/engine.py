"""Order lifecycle state machine.

Each event names the statuses it may start from, the status it leads to and
the manual table status it forces (if any). ``accept`` moves a submitted order
back to ``ORDERING``: staff taking an order into preparation reopens it so the
table can keep adding lines.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tablepos.fsm.states import OrderEvent, OrderStatus, TableStatus
from tablepos.services.errors import InvalidTransition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    sources: frozenset[OrderStatus]
    target: OrderStatus
    table_status: Optional[TableStatus] = None
    requires_submission: frozenset[OrderStatus] = frozenset()


TRANSITIONS: dict[OrderEvent, Transition] = {
    OrderEvent.SUBMIT: Transition(
        sources=frozenset({OrderStatus.ORDERING}),
        target=OrderStatus.SUBMITTED,
    ),
    OrderEvent.ACCEPT: Transition(
        sources=frozenset({OrderStatus.SUBMITTED}),
        target=OrderStatus.ORDERING,
        table_status=TableStatus.ORDERING,
    ),
    OrderEvent.CHECK_IN: Transition(
        sources=frozenset({OrderStatus.SUBMITTED}),
        target=OrderStatus.CHECKED_IN,
        table_status=TableStatus.CHECKED_IN,
    ),
    OrderEvent.SETTLE: Transition(
        sources=frozenset({OrderStatus.SUBMITTED, OrderStatus.CHECKED_IN, OrderStatus.ORDERING}),
        target=OrderStatus.PAID,
        table_status=TableStatus.PAID,
        # an accepted order sits in ORDERING again but has been submitted before
        requires_submission=frozenset({OrderStatus.ORDERING}),
    ),
    OrderEvent.CANCEL: Transition(
        sources=frozenset({OrderStatus.ORDERING, OrderStatus.SUBMITTED}),
        target=OrderStatus.CANCELLED,
    ),
}


def current_status(order) -> OrderStatus:
    return OrderStatus(order.status)


def can_fire(order, event: OrderEvent) -> bool:
    transition = TRANSITIONS[event]
    status = current_status(order)
    if status not in transition.sources:
        return False
    if status in transition.requires_submission and getattr(order, "submitted_at", None) is None:
        return False
    return True


def ensure_can_fire(order, event: OrderEvent) -> None:
    status = current_status(order)
    if not can_fire(order, event):
        logger.warning(
            "rejected transition order_id=%s event=%s status=%s",
            order.id,
            event.value,
            status.value,
        )
        raise InvalidTransition(
            f"Cannot {event.value} an order in status {status.value}",
            event=event.value,
            status=status.value,
        )


def fire(order, event: OrderEvent) -> Transition:
    """Move ``order`` along ``event`` or raise ``InvalidTransition``.

    Returns the transition so callers can apply the table side effect.
    """
    ensure_can_fire(order, event)
    status = current_status(order)
    transition = TRANSITIONS[event]
    order.status = transition.target.value
    logger.info(
        "order transition order_id=%s event=%s from=%s to=%s",
        order.id,
        event.value,
        status.value,
        transition.target.value,
    )
    return transition


def allowed_events(order) -> list[OrderEvent]:
    return [event for event in TRANSITIONS if can_fire(order, event)]
