"""Shared BDD fixtures and step definitions for checkout."""

import pytest
from checkout.config import ACCESS_CHECKOUT
from checkout.exceptions import CheckoutValidationError
from checkout.flow.access import Actor
from checkout.order.cart import RemoveCartItem
from checkout.order.lifecycle import CancelOrder
from checkout.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then

CUSTOMER_ID = "cust-001"


@pytest.fixture()
def error():
    """Container for captured checkout validation errors."""
    return {"exc": None}


@pytest.fixture()
def customer():
    return Actor(user_id=CUSTOMER_ID, permissions=frozenset({ACCESS_CHECKOUT}))


@pytest.fixture()
def try_submit(submit, error):
    """Submit a step, recording a validation failure instead of raising it."""

    def _try(order_id, step_id, values=None, actor=None):
        try:
            return submit(order_id, step_id, values, actor=actor)
        except CheckoutValidationError as exc:
            error["exc"] = exc
            return None

    return _try


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a guest cart with a "{title}" priced {price:f}'), target_fixture="order_id")
def guest_cart(make_cart, title, price):
    return make_cart(items=(("var-001", "SKU-001", title, 1, price),))


@given(parsers.cfparse('a customer cart with a "{title}" priced {price:f}'), target_fixture="order_id")
def customer_cart(make_cart, title, price):
    return make_cart(customer_id=CUSTOMER_ID, session_id=None, items=(("var-001", "SKU-001", title, 1, price),))


@given("the last item is removed")
def last_item_removed(order_id):
    order = _order(order_id)
    current_domain.process(RemoveCartItem(order_id=order_id, item_id=order.items[-1].id), asynchronous=False)


@given("the order is canceled")
def order_canceled(order_id):
    current_domain.process(CancelOrder(order_id=order_id, reason="Changed my mind"), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the submission fails on "{field}" with reason "{reason}"'))
def submission_fails(error, field, reason):
    assert error["exc"] is not None
    assert reason in error["exc"].reasons_for(field)


@then(parsers.cfparse('the order is on the "{step_id}" step'))
def order_on_step(order_id, step_id):
    assert _order(order_id).checkout_step == step_id


@then(parsers.cfparse('the order state is "{state}"'))
def order_state(order_id, state):
    assert _order(order_id).state == state
