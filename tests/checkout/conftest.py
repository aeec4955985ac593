import json

import pytest
from protean.integrations.pytest import DomainFixture

GUEST_SESSION = "sess-guest-001"

BILLING_ADDRESS = {
    "billing_information.given_name": "Frederick",
    "billing_information.family_name": "Pabst",
    "billing_information.address_line1": "Pabst Blue Ribbon Dr",
    "billing_information.postal_code": "53177",
    "billing_information.locality": "Milwaukee",
    "billing_information.administrative_area": "WI",
}


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout

    bed = DomainFixture(checkout)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed):
    from checkout.flow import reset_checkout_flow
    from checkout.notification import reset_email_channel
    from checkout.payment import reset_gateway

    with checkout_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()

    reset_checkout_flow()
    reset_gateway()
    reset_email_channel()


@pytest.fixture()
def guest():
    from checkout.flow.access import Actor

    return Actor.anonymous(GUEST_SESSION)


@pytest.fixture()
def make_cart():
    """Create a persisted cart with line items and return its id."""
    from checkout.order.cart import AddCartItem, CreateCart
    from protean import current_domain

    def _make(customer_id=None, session_id=GUEST_SESSION, items=(("var-001", "SKU-001", "Widget", 1, 10.0),)):
        order_id = current_domain.process(
            CreateCart(customer_id=customer_id, session_id=session_id),
            asynchronous=False,
        )
        for variant_id, sku, title, quantity, unit_price in items:
            current_domain.process(
                AddCartItem(
                    order_id=order_id,
                    variant_id=variant_id,
                    sku=sku,
                    title=title,
                    quantity=quantity,
                    unit_price=unit_price,
                ),
                asynchronous=False,
            )
        return order_id

    return _make


@pytest.fixture()
def submit(guest):
    """Submit a checkout step as an actor (the guest by default)."""
    from checkout.flow.submission import SubmitCheckoutStep
    from protean import current_domain

    def _submit(order_id, step_id, values=None, actor=None, revision=None, op="next"):
        actor = actor or guest
        return current_domain.process(
            SubmitCheckoutStep(
                order_id=order_id,
                step_id=step_id,
                values=json.dumps(values or {}),
                user_id=actor.user_id,
                session_id=actor.session_id,
                permissions=json.dumps(sorted(actor.permissions)),
                expected_revision=revision,
                op=op,
            ),
            asynchronous=False,
        )

    return _submit


@pytest.fixture()
def order_information():
    """Valid contact and billing values for the order information step."""
    return {
        "contact_information.email": "guest@example.com",
        "contact_information.email_confirm": "guest@example.com",
        **BILLING_ADDRESS,
    }
