from __future__ import annotations

from enum import Enum


class OrderStatus(str, Enum):
    ORDERING = "ORDERING"
    SUBMITTED = "SUBMITTED"
    CHECKED_IN = "CHECKED_IN"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class TableStatus(str, Enum):
    IDLE = "IDLE"
    ORDERING = "ORDERING"
    CHECKED_IN = "CHECKED_IN"
    PAID = "PAID"


class OrderEvent(str, Enum):
    SUBMIT = "submit"
    ACCEPT = "accept"
    CHECK_IN = "check_in"
    SETTLE = "settle"
    CANCEL = "cancel"


# Orders a table is still "occupied" by
OPEN_STATUSES = frozenset({OrderStatus.ORDERING, OrderStatus.SUBMITTED, OrderStatus.CHECKED_IN})

# Lines can still be added or removed
EDITABLE_STATUSES = frozenset({OrderStatus.ORDERING, OrderStatus.SUBMITTED})
