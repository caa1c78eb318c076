from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from tablepos.services.table_state import (
    DISPLAY_IDLE,
    DISPLAY_ORDERING,
    DISPLAY_PAID,
    DISPLAY_PAID_UNSERVED,
    DISPLAY_PREPARING,
    DISPLAY_SERVED,
    build_table_link,
    describe_table,
    latest_open_candidate,
    resolve_table_order,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _table(status="IDLE", table_id="tab1"):
    return SimpleNamespace(id=table_id, name="Table 1", status=status)


def _order(order_id, status, minutes=0, table_id="tab1", submitted=True, served=None):
    served = served if served is not None else []
    return SimpleNamespace(
        id=order_id,
        table_id=table_id,
        status=status,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        submitted_at=BASE_TIME if submitted else None,
        order_items=[SimpleNamespace(is_served=flag) for flag in served],
    )


def test_idle_table_with_paid_latest_order_has_no_active_order():
    orders = [_order("ORD-A", "PAID")]

    assert resolve_table_order(_table("IDLE"), orders) is None
    assert describe_table(_table("IDLE"), orders).display_status == DISPLAY_IDLE


def test_idle_table_with_submitted_latest_order_shows_that_order():
    order = _order("ORD-A", "SUBMITTED", served=[False])

    view = describe_table(_table("IDLE"), [order])

    assert view.active_order is order
    assert view.display_status == DISPLAY_PREPARING
    assert view.unserved_count == 1


def test_paid_table_still_shows_paid_order():
    view = describe_table(_table("PAID"), [_order("ORD-A", "PAID", served=[True])])

    assert view.display_status == DISPLAY_PAID


def test_paid_with_unserved_lines_is_flagged():
    view = describe_table(_table("PAID"), [_order("ORD-A", "PAID", served=[True, False])])

    assert view.display_status == DISPLAY_PAID_UNSERVED
    assert view.unserved_count == 1


def test_cancelled_orders_are_never_candidates():
    older = _order("ORD-A", "SUBMITTED", minutes=0, served=[True])
    newer_cancelled = _order("ORD-B", "CANCELLED", minutes=5)

    assert latest_open_candidate("tab1", [older, newer_cancelled]) is older


def test_newest_order_wins_and_other_tables_are_ignored():
    old = _order("ORD-A", "PAID", minutes=0)
    new = _order("ORD-B", "ORDERING", minutes=10, submitted=False)
    elsewhere = _order("ORD-C", "ORDERING", minutes=20, table_id="tab2")

    view = describe_table(_table("IDLE"), [old, new, elsewhere])

    assert view.active_order is new
    assert view.display_status == DISPLAY_ORDERING


def test_accepted_order_is_shown_as_preparing_not_ordering():
    accepted = _order("ORD-A", "ORDERING", submitted=True, served=[False])

    assert describe_table(_table("ORDERING"), [accepted]).display_status == DISPLAY_PREPARING


def test_all_lines_served_reads_served():
    view = describe_table(_table("CHECKED_IN"), [_order("ORD-A", "CHECKED_IN", served=[True, True])])

    assert view.display_status == DISPLAY_SERVED


def test_table_without_orders_is_idle():
    view = describe_table(_table("IDLE"), [])

    assert view.active_order is None
    assert view.display_status == DISPLAY_IDLE


def test_table_link_points_at_customer_mode():
    link = build_table_link(_table(table_id="tab 3"), "https://order.example.com/")

    assert link == "https://order.example.com/?mode=customer&tableId=tab+3"
