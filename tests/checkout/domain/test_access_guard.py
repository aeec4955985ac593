"""Tests for who may reach which checkout step of an order."""

import pytest
from checkout.flow import build_checkout_flow
from checkout.flow.access import AccessGuard, Actor
from checkout.flow.steps import ResolutionKind
from checkout.order.order import Order

OWNER = Actor(user_id="cust-001", permissions=frozenset({"access checkout"}))
STRANGER = Actor(user_id="cust-002", permissions=frozenset({"access checkout"}))
ADMIN = Actor(user_id="admin-001", permissions=frozenset({"access checkout", "administer orders"}))


@pytest.fixture()
def guard():
    return AccessGuard(build_checkout_flow())


def _order(customer_id="cust-001", session_id=None, with_item=True):
    order = Order.create(customer_id=customer_id, session_id=session_id)
    if with_item:
        order.add_item(variant_id="var-001", sku="SKU-001", title="Widget", quantity=1, unit_price=10.0)
    return order


class TestActor:
    def test_anonymous_actor(self):
        actor = Actor.anonymous("sess-001")
        assert actor.is_anonymous
        assert actor.has_permission("access checkout")

    def test_administrator_needs_both_permissions(self):
        assert ADMIN.is_administrator
        assert not Actor(user_id="x", permissions=frozenset({"administer orders"})).is_administrator


class TestAccessRules:
    def test_actor_without_permission_is_denied(self, guard):
        actor = Actor(user_id="cust-001", permissions=frozenset())
        resolution = guard.check(actor, _order(), "order_information")
        assert resolution.kind is ResolutionKind.DENY
        assert resolution.reason == "missing_permission"

    def test_anonymous_actor_without_session_is_denied(self, guard):
        order = _order(customer_id=None, session_id="sess-001")
        assert not guard.can_access(Actor.anonymous(None), order)

    def test_anonymous_actor_with_another_session_is_denied(self, guard):
        order = _order(customer_id=None, session_id="sess-001")
        assert not guard.can_access(Actor.anonymous("sess-999"), order)

    def test_anonymous_actor_cannot_reach_a_customer_order(self, guard):
        assert not guard.can_access(Actor.anonymous("sess-001"), _order())

    def test_anonymous_actor_with_bound_session_is_allowed(self, guard):
        order = _order(customer_id=None, session_id="sess-001")
        resolution = guard.check(Actor.anonymous("sess-001"), order, "login")
        assert resolution.kind is ResolutionKind.RENDER

    def test_owner_is_allowed(self, guard):
        resolution = guard.check(OWNER, _order(), "order_information")
        assert resolution.kind is ResolutionKind.RENDER

    def test_other_customer_is_denied(self, guard):
        resolution = guard.check(STRANGER, _order(), "order_information")
        assert resolution.kind is ResolutionKind.DENY
        assert resolution.reason == "not_your_order"

    def test_administrator_is_allowed(self, guard):
        assert guard.can_access(ADMIN, _order())

    def test_order_without_items_is_denied(self, guard):
        resolution = guard.check(OWNER, _order(with_item=False), "order_information")
        assert resolution.kind is ResolutionKind.DENY
        assert resolution.reason == "empty"

    def test_canceled_order_is_denied(self, guard):
        order = _order()
        order.cancel()

        resolution = guard.check(OWNER, order, "order_information")
        assert resolution.kind is ResolutionKind.DENY
        assert resolution.reason == "canceled"

    def test_unreachable_step_redirects_for_the_owner(self, guard):
        resolution = guard.check(OWNER, _order(), "review")
        assert resolution.kind is ResolutionKind.REDIRECT
        assert resolution.step_id == "order_information"
        assert guard.can_access(OWNER, _order(), "review")

    def test_denial_takes_precedence_over_redirect(self, guard):
        resolution = guard.check(STRANGER, _order(), "review")
        assert resolution.kind is ResolutionKind.DENY
