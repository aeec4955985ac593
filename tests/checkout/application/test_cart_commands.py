"""Application tests for cart and order lifecycle commands."""

import pytest
from checkout.exceptions import GuardRejected, StepNotFound
from checkout.order.cart import AddCartItem, CreateCart, RemoveCartItem, UpdateCartItemQuantity
from checkout.order.lifecycle import CancelOrder, CompleteOrder, StartCheckout
from checkout.order.order import Order
from protean import current_domain


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


def _add(order_id, variant_id="var-001", quantity=1, unit_price=10.0):
    return current_domain.process(
        AddCartItem(
            order_id=order_id,
            variant_id=variant_id,
            sku=f"SKU-{variant_id}",
            title=f"Product {variant_id}",
            quantity=quantity,
            unit_price=unit_price,
        ),
        asynchronous=False,
    )


class TestCartCommands:
    def test_create_cart(self):
        order_id = current_domain.process(CreateCart(session_id="sess-001"), asynchronous=False)

        order = _order(order_id)
        assert order.state == "draft"
        assert order.session_id == "sess-001"
        assert order.is_cart is True

    def test_add_items(self, make_cart):
        order_id = make_cart(items=())
        _add(order_id, "var-001", 2, 10.0)
        _add(order_id, "var-002", 1, 5.5)

        order = _order(order_id)
        assert len(order.items) == 2
        assert order.total_price == 25.5

    def test_update_quantity(self, make_cart):
        order_id = make_cart(items=())
        item_id = _add(order_id)

        current_domain.process(
            UpdateCartItemQuantity(order_id=order_id, item_id=item_id, new_quantity=3),
            asynchronous=False,
        )

        assert _order(order_id).total_price == 30.0

    def test_remove_item(self, make_cart):
        order_id = make_cart(items=())
        item_id = _add(order_id)

        current_domain.process(RemoveCartItem(order_id=order_id, item_id=item_id), asynchronous=False)

        assert _order(order_id).items == []


class TestStartCheckout:
    def test_start_checkout(self, make_cart):
        order_id = make_cart()

        current_domain.process(StartCheckout(order_id=order_id), asynchronous=False)

        assert _order(order_id).state == "in_checkout"

    def test_start_checkout_on_empty_cart_is_rejected(self, make_cart):
        order_id = make_cart(items=())

        with pytest.raises(GuardRejected):
            current_domain.process(StartCheckout(order_id=order_id), asynchronous=False)

    def test_start_checkout_rejects_unknown_first_step(self, make_cart):
        order_id = make_cart()

        with pytest.raises(StepNotFound):
            current_domain.process(StartCheckout(order_id=order_id, first_step="shipping_method"), asynchronous=False)

        order = _order(order_id)
        assert order.state == "draft"
        assert order.checkout_step is None

    def test_removing_last_item_returns_to_cart(self, make_cart):
        order_id = make_cart(items=())
        item_id = _add(order_id)
        current_domain.process(StartCheckout(order_id=order_id, first_step="order_information"), asynchronous=False)
        assert _order(order_id).checkout_step == "order_information"

        current_domain.process(RemoveCartItem(order_id=order_id, item_id=item_id), asynchronous=False)

        order = _order(order_id)
        assert order.state == "draft"
        assert order.checkout_step is None


class TestOrderLifecycle:
    def test_cancel(self, make_cart):
        order_id = make_cart()

        current_domain.process(CancelOrder(order_id=order_id, reason="Duplicate"), asynchronous=False)

        order = _order(order_id)
        assert order.state == "canceled"
        assert order.is_cart is False

    def test_complete_requires_placed_order(self, make_cart):
        order_id = make_cart()

        with pytest.raises(GuardRejected):
            current_domain.process(CompleteOrder(order_id=order_id), asynchronous=False)

    def test_complete_placed_order(self, make_cart, submit, order_information):
        order_id = make_cart()
        submit(order_id, "login", {"guest.continue": "1"})
        submit(order_id, "order_information", order_information)
        submit(order_id, "review")

        current_domain.process(CompleteOrder(order_id=order_id), asynchronous=False)

        order = _order(order_id)
        assert order.state == "completed"
        assert order.completed_at is not None
