from types import SimpleNamespace

import pytest

from tablepos.fsm.states import OrderStatus
from tablepos.models.dish import Dish
from tablepos.models.order import Order
from tablepos.models.order_item import OrderItem
from tablepos.services.cart import apply_selection, compute_service_fee, compute_totals, normalize_choice
from tablepos.services.errors import InvalidTransition, NotFound, ValidationFailure
from tests.fixtures_data import COOKIE, LATTE, SOLD_OUT_CAKE

NO_FEE = SimpleNamespace(is_service_fee_enabled=False, service_fee_rate=0.1)
TEN_PERCENT = SimpleNamespace(is_service_fee_enabled=True, service_fee_rate=0.1)


def _order(status=OrderStatus.ORDERING.value):
    return Order(
        id="ORD-TEST01",
        table_id="tab1",
        table_name="Table 1",
        random_code="4821",
        status=status,
        service_fee=0,
        total_amount=0,
    )


def _line_total(order):
    return sum(item.price * item.quantity for item in order.order_items)


def test_same_dish_option_and_note_merge_into_one_line():
    order = _order()
    latte = Dish(**LATTE)

    apply_selection(order, "l2", 1, NO_FEE, dish=latte, option="Hot", note="less sugar")
    apply_selection(order, "l2", 1, NO_FEE, dish=latte, option="Hot", note="less sugar")

    assert len(order.order_items) == 1
    assert order.order_items[0].quantity == 2
    assert order.total_amount == 320


def test_different_notes_never_merge():
    order = _order()
    latte = Dish(**LATTE)

    apply_selection(order, "l2", 1, NO_FEE, dish=latte, option="Hot", note="less sugar")
    apply_selection(order, "l2", 1, NO_FEE, dish=latte, option="Hot", note="extra shot")
    apply_selection(order, "l2", 1, NO_FEE, dish=latte, option="Hot")

    assert len(order.order_items) == 3
    assert {item.custom_note for item in order.order_items} == {"less sugar", "extra shot", None}


def test_blank_note_is_the_same_line_as_no_note():
    order = _order()
    latte = Dish(**LATTE)

    apply_selection(order, "l2", 1, NO_FEE, dish=latte, option="Iced", note="   ")
    apply_selection(order, "l2", 1, NO_FEE, dish=latte, option="Iced")

    assert len(order.order_items) == 1
    assert order.order_items[0].custom_note is None
    assert normalize_choice("  ") is None


def test_add_then_remove_leaves_no_line_and_zero_total():
    order = _order()
    cookie = Dish(**COOKIE)

    apply_selection(order, "k1", 1, TEN_PERCENT, dish=cookie)
    removed = apply_selection(order, "k1", -1, TEN_PERCENT, dish=cookie)

    assert removed is None
    assert order.order_items == []
    assert order.total_amount == 0
    assert order.service_fee == 0


def test_new_line_starts_at_one_whatever_the_delta():
    order = _order()

    line = apply_selection(order, "k1", 5, NO_FEE, dish=Dish(**COOKIE))

    assert line.quantity == 1


def test_decrement_of_missing_line_is_a_no_op():
    order = _order()

    assert apply_selection(order, "k1", -1, NO_FEE, dish=None) is None
    assert order.order_items == []


def test_totals_never_drift_after_many_changes():
    order = _order()
    latte = Dish(**LATTE)
    cookie = Dish(**COOKIE)

    for delta, dish, option in [
        (1, latte, "Hot"),
        (1, cookie, None),
        (1, latte, "Hot"),
        (1, latte, "Iced"),
        (-1, latte, "Hot"),
        (1, cookie, None),
        (-1, latte, "Iced"),
    ]:
        apply_selection(order, dish.id, delta, TEN_PERCENT, dish=dish, option=option)
        subtotal = _line_total(order)
        assert order.total_amount == subtotal + compute_service_fee(subtotal, TEN_PERCENT)


def test_service_fee_rounds_half_up():
    assert compute_service_fee(155, TEN_PERCENT) == 16
    assert compute_service_fee(154, TEN_PERCENT) == 15
    assert compute_service_fee(155, NO_FEE) == 0

    totals = compute_totals([OrderItem(price=155, quantity=1)], TEN_PERCENT)
    assert (totals.subtotal, totals.service_fee, totals.total_amount) == (155, 16, 171)


def test_line_keeps_price_captured_at_selection():
    order = _order()
    latte = Dish(**LATTE)
    apply_selection(order, "l2", 1, NO_FEE, dish=latte, option="Hot")

    latte.price = 999
    apply_selection(order, "l2", 1, NO_FEE, dish=latte, option="Hot")

    assert order.order_items[0].price == 160
    assert order.total_amount == 320


def test_dish_with_options_requires_a_valid_option():
    order = _order()
    latte = Dish(**LATTE)

    with pytest.raises(ValidationFailure):
        apply_selection(order, "l2", 1, NO_FEE, dish=latte)
    with pytest.raises(ValidationFailure):
        apply_selection(order, "l2", 1, NO_FEE, dish=latte, option="Matcha")
    with pytest.raises(ValidationFailure):
        apply_selection(order, "k1", 1, NO_FEE, dish=Dish(**COOKIE), option="Hot")


def test_notes_only_where_the_dish_allows_them():
    order = _order()

    with pytest.raises(ValidationFailure):
        apply_selection(order, "k1", 1, NO_FEE, dish=Dish(**COOKIE), note="warm it up")


def test_unavailable_or_missing_dish_is_rejected():
    order = _order()

    with pytest.raises(ValidationFailure):
        apply_selection(order, "k2", 1, NO_FEE, dish=Dish(**SOLD_OUT_CAKE))
    with pytest.raises(NotFound):
        apply_selection(order, "zz", 1, NO_FEE, dish=None)


def test_zero_delta_is_rejected():
    with pytest.raises(ValidationFailure):
        apply_selection(_order(), "k1", 0, NO_FEE, dish=Dish(**COOKIE))


@pytest.mark.parametrize("status", [OrderStatus.CHECKED_IN.value, OrderStatus.PAID.value, OrderStatus.CANCELLED.value])
def test_items_are_frozen_outside_editable_statuses(status):
    with pytest.raises(InvalidTransition):
        apply_selection(_order(status), "k1", 1, NO_FEE, dish=Dish(**COOKIE))


def test_submitted_order_still_accepts_additions():
    order = _order(OrderStatus.SUBMITTED.value)

    apply_selection(order, "k1", 1, NO_FEE, dish=Dish(**COOKIE))

    assert order.total_amount == 45
