"""Pydantic request/response schemas for the Checkout API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Checkout step submissions are form-encoded and
have no schema here; their keys follow the ``{pane}.{field}`` convention.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    customer_id: str | None = None
    session_id: str | None = None
    email: str | None = None
    currency: str = Field(default="USD", min_length=3, max_length=3)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": None,
                    "session_id": "sess-7f3a",
                    "currency": "USD",
                }
            ]
        }
    }


class AddCartItemRequest(BaseModel):
    variant_id: str
    sku: str
    title: str
    quantity: int = Field(ge=1, default=1)
    unit_price: float = Field(ge=0)


class UpdateCartItemRequest(BaseModel):
    new_quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CancelOrderRequest(BaseModel):
    reason: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartIdResponse(BaseModel):
    cart_id: str


class ItemIdResponse(BaseModel):
    item_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class CheckoutStartedResponse(BaseModel):
    order_id: str
    checkout_url: str


class CartItemResponse(BaseModel):
    item_id: str
    variant_id: str
    sku: str
    title: str
    quantity: int
    unit_price: float
    total_price: float


class CartResponse(BaseModel):
    order_id: str
    state: str
    checkout_step: str | None = None
    customer_id: str | None = None
    email: str | None = None
    items: list[CartItemResponse]
    total_price: float
    currency: str
    order_number: int | None = None
    revision: int
