"""Tests for the checkout step sequencer: ordering, visibility and step gating."""

from dataclasses import replace

import pytest
from checkout.config import CheckoutFlowConfig
from checkout.exceptions import StepNotFound
from checkout.flow import build_checkout_flow
from checkout.flow.access import Actor
from checkout.flow.steps import DEFAULT_STEPS, CheckoutFlow, CheckoutStep, ResolutionKind
from checkout.order.order import Order

GUEST = Actor.anonymous("sess-001")
CUSTOMER = Actor(user_id="cust-001", permissions=frozenset({"access checkout"}))


def _order(unit_price=10.0, customer_id=None):
    order = Order.create(customer_id=customer_id, session_id="sess-001")
    order.add_item(variant_id="var-001", sku="SKU-001", title="Widget", quantity=1, unit_price=unit_price)
    return order


def _in_checkout(step_id, **kwargs):
    order = _order(**kwargs)
    order.apply_transition("start_checkout")
    order.checkout_step = step_id
    return order


def _placed(**kwargs):
    order = _in_checkout("review", **kwargs)
    order.record_payment("rcpt-001", order.total_price)
    order.checkout_step = "complete"
    order.place(1)
    return order


@pytest.fixture()
def flow():
    return build_checkout_flow()


class TestStepDefinitions:
    def test_default_step_order(self):
        assert [s.step_id for s in DEFAULT_STEPS] == ["login", "order_information", "review", "payment", "complete"]

    def test_only_review_can_be_returned_to(self):
        labels = {s.step_id: s.previous_label for s in DEFAULT_STEPS}
        assert labels == {
            "login": None,
            "order_information": None,
            "review": "Go back",
            "payment": None,
            "complete": None,
        }

    def test_payment_is_hidden(self):
        assert next(s for s in DEFAULT_STEPS if s.step_id == "payment").hidden

    def test_last_step_must_be_complete(self, flow):
        with pytest.raises(ValueError):
            CheckoutFlow(flow.config, flow.panes, steps=DEFAULT_STEPS[:-1])

    def test_step_ids_must_be_unique(self, flow):
        with pytest.raises(ValueError):
            CheckoutFlow(flow.config, flow.panes, steps=(DEFAULT_STEPS[0],) + DEFAULT_STEPS)

    def test_unknown_step(self, flow):
        with pytest.raises(StepNotFound):
            flow.get_step("shipping_method")


class TestStepVisibility:
    def test_guest_sees_login_step(self, flow):
        ids = [s.step_id for s in flow.visible_steps(_order(), GUEST)]
        assert ids == ["login", "order_information", "review", "payment", "complete"]

    def test_authenticated_customer_skips_login(self, flow):
        ids = [s.step_id for s in flow.visible_steps(_order(customer_id="cust-001"), CUSTOMER)]
        assert ids[0] == "order_information"
        assert "login" not in ids

    def test_login_stays_visible_without_guest_checkout(self):
        flow = build_checkout_flow(CheckoutFlowConfig(allow_guest_checkout=False))
        # Returning customers can still log in
        assert flow.is_step_visible(flow.get_step("login"), _order(), GUEST)

    def test_free_order_skips_payment(self, flow):
        ids = [s.step_id for s in flow.visible_steps(_order(unit_price=0.0), GUEST)]
        assert "payment" not in ids

    def test_complete_is_always_visible(self, flow):
        assert flow.is_step_visible(flow.get_step("complete"), _order(), GUEST)


class TestCurrentStep:
    def test_new_order_starts_on_first_visible_step(self, flow):
        assert flow.current_step(_order(), GUEST).step_id == "login"
        assert flow.current_step(_order(customer_id="cust-001"), CUSTOMER).step_id == "order_information"

    def test_in_checkout_without_step_starts_on_first_step(self, flow):
        assert flow.current_step(_in_checkout(None), GUEST).step_id == "login"

    def test_unknown_recorded_step_falls_back_to_first_step(self, flow):
        assert flow.current_step(_in_checkout("shipping_method"), GUEST).step_id == "login"

    def test_recorded_step_is_current(self, flow):
        assert flow.current_step(_in_checkout("review"), GUEST).step_id == "review"

    def test_finished_order_is_on_complete(self, flow):
        assert flow.current_step(_placed(), GUEST).step_id == "complete"


class TestNextAndPreviousStep:
    def test_next_step(self, flow):
        order = _in_checkout("order_information")
        assert flow.next_step(order, GUEST).step_id == "review"

    def test_next_step_after_review_is_hidden_payment(self, flow):
        order = _in_checkout("review")
        assert flow.next_step(order, GUEST).step_id == "payment"

    def test_next_step_skips_invisible_steps(self, flow):
        order = _in_checkout("review", unit_price=0.0)
        assert flow.next_step(order, GUEST).step_id == "complete"

    def test_nothing_after_complete(self, flow):
        order = _placed()
        assert flow.next_step(order, GUEST, flow.get_step("complete")) is None

    def test_previous_step_ignores_hidden_steps(self, flow):
        order = _in_checkout("review")
        assert flow.previous_step(order, GUEST, flow.get_step("complete")).step_id == "review"

    def test_no_previous_step_on_first_step(self, flow):
        assert flow.previous_step(_order(), GUEST) is None


class TestResolve:
    def test_current_step_renders(self, flow):
        resolution = flow.resolve(_in_checkout("review"), GUEST, "review")
        assert resolution.kind is ResolutionKind.RENDER
        assert resolution.step_id == "review"

    def test_no_requested_step_redirects_to_current(self, flow):
        resolution = flow.resolve(_in_checkout("review"), GUEST)
        assert resolution.kind is ResolutionKind.REDIRECT
        assert resolution.step_id == "review"

    def test_step_ahead_redirects_to_current(self, flow):
        resolution = flow.resolve(_order(), GUEST, "review")
        assert resolution.kind is ResolutionKind.REDIRECT
        assert resolution.step_id == "login"
        assert resolution.reason == "ahead"

    def test_complete_before_placement_redirects_to_current(self, flow):
        resolution = flow.resolve(_order(), GUEST, "complete")
        assert resolution.kind is ResolutionKind.REDIRECT
        assert resolution.step_id == "login"

    def test_passed_step_without_previous_label_redirects(self, flow):
        resolution = flow.resolve(_in_checkout("review"), GUEST, "order_information")
        assert resolution.kind is ResolutionKind.REDIRECT
        assert resolution.step_id == "review"
        assert resolution.reason == "passed"

    def test_passed_step_with_previous_label_renders(self):
        steps = tuple(
            replace(step, previous_label="Go back") if step.step_id == "order_information" else step
            for step in DEFAULT_STEPS
        )
        flow = build_checkout_flow(steps=steps)

        resolution = flow.resolve(_in_checkout("review"), GUEST, "order_information")
        assert resolution.kind is ResolutionKind.RENDER

    def test_hidden_step_is_never_rendered(self, flow):
        resolution = flow.resolve(_in_checkout("review"), GUEST, "payment")
        assert resolution.kind is ResolutionKind.REDIRECT
        assert resolution.step_id == "review"

    def test_invisible_step_redirects(self, flow):
        order = _in_checkout("order_information", customer_id="cust-001")
        resolution = flow.resolve(order, CUSTOMER, "login")
        assert resolution.kind is ResolutionKind.REDIRECT
        assert resolution.step_id == "order_information"

    @pytest.mark.parametrize("step_id", ["login", "order_information", "review"])
    def test_finished_order_redirects_to_complete(self, flow, step_id):
        resolution = flow.resolve(_placed(), GUEST, step_id)
        assert resolution.kind is ResolutionKind.REDIRECT
        assert resolution.step_id == "complete"

    def test_finished_order_renders_complete(self, flow):
        resolution = flow.resolve(_placed(), GUEST, "complete")
        assert resolution.kind is ResolutionKind.RENDER

    def test_unknown_step_raises(self, flow):
        with pytest.raises(StepNotFound):
            flow.resolve(_order(), GUEST, "shipping_method")

    def test_custom_steps_can_be_supplied(self):
        steps = (
            CheckoutStep("order_information", "Order information"),
            CheckoutStep("complete", "Complete", has_sidebar=False),
        )
        flow = build_checkout_flow(steps=steps)

        assert flow.current_step(_order(), GUEST).step_id == "order_information"
