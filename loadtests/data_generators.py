"""Faker-based data generators for the checkout load test scenarios.

Each generator produces payloads that pass the checkout's validation rules
and match the field names expected by the cart API's Pydantic request
schemas and the ``{pane}.{field}`` form keys of the checkout steps.
"""

import random
import uuid

from faker import Faker

fake = Faker()

# ---------- Shoppers ----------


def session_id() -> str:
    """Generate browser session ids like 'sess-lt-a1b2c3d4e5f6'."""
    return f"sess-lt-{uuid.uuid4().hex[:12]}"


def valid_email() -> str:
    """Generate unique emails the contact pane accepts."""
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


def username() -> str:
    """Generate usernames made only of characters registration allows."""
    return f"{fake.user_name()[:20]}_{uuid.uuid4().hex[:4]}"


# ---------- Cart ----------


def cart_data(session: str | None = None, customer_id: str | None = None) -> dict:
    """Generate CreateCartRequest payload."""
    payload = {"currency": "USD"}
    if customer_id:
        payload["customer_id"] = customer_id
    else:
        payload["session_id"] = session or session_id()
    return payload


def cart_item_data() -> dict:
    """Generate AddCartItemRequest payload."""
    suffix = uuid.uuid4().hex[:8]
    return {
        "variant_id": f"var-{suffix}",
        "sku": f"LT-{suffix.upper()}",
        "title": fake.catch_phrase()[:60],
        "quantity": random.randint(1, 3),
        "unit_price": round(random.uniform(5.0, 250.0), 2),
    }


# ---------- Checkout forms ----------


def billing_values(pane: str = "billing_information") -> dict:
    """Generate address form values for a profile pane."""
    return {
        f"{pane}.given_name": fake.first_name()[:100],
        f"{pane}.family_name": fake.last_name()[:100],
        f"{pane}.address_line1": fake.street_address()[:255],
        f"{pane}.postal_code": fake.zipcode()[:20],
        f"{pane}.locality": fake.city()[:100],
        f"{pane}.administrative_area": fake.state_abbr(),
        f"{pane}.country_code": "US",
    }


def order_information_values(email: str | None = None) -> dict:
    """Generate the guest's contact and billing values for the order information step."""
    email = email or valid_email()
    return {
        "contact_information.email": email,
        "contact_information.email_confirm": email,
        **billing_values(),
    }


def registration_values() -> dict:
    """Generate values for the registration pane of the login step."""
    password = fake.password(length=12)
    return {
        "register.email": valid_email(),
        "register.username": username(),
        "register.password": password,
        "register.password_confirm": password,
    }
