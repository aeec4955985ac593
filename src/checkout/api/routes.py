"""FastAPI routes for the Checkout domain — carts, orders and checkout steps."""

import json
from dataclasses import asdict

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from protean.utils.globals import current_domain

from checkout.api.schemas import (
    AddCartItemRequest,
    CancelOrderRequest,
    CartIdResponse,
    CartItemResponse,
    CartResponse,
    CheckoutStartedResponse,
    CreateCartRequest,
    ItemIdResponse,
    StatusResponse,
    UpdateCartItemRequest,
)
from checkout.exceptions import (
    AccessDenied,
    CheckoutValidationError,
    ConcurrencyConflict,
    GuardRejected,
    StepNotFound,
)
from checkout.flow import get_checkout_flow
from checkout.flow.access import Actor
from checkout.flow.page import resolve_checkout_page, step_url, view_checkout_page
from checkout.flow.submission import NEXT, SubmitCheckoutStep
from checkout.order.cart import AddCartItem, CreateCart, RemoveCartItem, UpdateCartItemQuantity
from checkout.order.lifecycle import CancelOrder, CompleteOrder, StartCheckout
from checkout.order.order import Order


def current_actor(
    x_user_id: str = Header(default=""),
    x_session_id: str = Header(default=""),
    x_permissions: str | None = Header(default=None),
) -> Actor:
    """Identify the actor from request headers.

    Without ``X-Permissions`` the actor gets the configured default
    permissions for anonymous or authenticated users.
    """
    if x_permissions is None:
        config = get_checkout_flow().config
        permissions = config.authenticated_permissions if x_user_id else config.anonymous_permissions
    else:
        permissions = {p.strip() for p in x_permissions.split(",") if p.strip()}

    return Actor(
        user_id=x_user_id or None,
        session_id=x_session_id or None,
        permissions=frozenset(permissions),
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateCart(
        customer_id=body.customer_id,
        session_id=body.session_id,
        email=body.email,
        currency=body.currency,
    )
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    order = current_domain.repository_for(Order).get(cart_id)
    return CartResponse(
        order_id=str(order.id),
        state=order.state,
        checkout_step=order.checkout_step,
        customer_id=str(order.customer_id) if order.customer_id else None,
        email=order.email,
        items=[
            CartItemResponse(
                item_id=str(item.id),
                variant_id=str(item.variant_id),
                sku=item.sku,
                title=item.title,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for item in order.items
        ],
        total_price=order.total_price,
        currency=order.currency,
        order_number=order.order_number,
        revision=order.revision,
    )


@cart_router.post("/{cart_id}/items", status_code=201, response_model=ItemIdResponse)
async def add_cart_item(cart_id: str, body: AddCartItemRequest) -> ItemIdResponse:
    command = AddCartItem(
        order_id=cart_id,
        variant_id=body.variant_id,
        sku=body.sku,
        title=body.title,
        quantity=body.quantity,
        unit_price=body.unit_price,
    )
    result = current_domain.process(command, asynchronous=False)
    return ItemIdResponse(item_id=result)


@cart_router.put("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def update_cart_item_quantity(cart_id: str, item_id: str, body: UpdateCartItemRequest) -> StatusResponse:
    command = UpdateCartItemQuantity(
        order_id=cart_id,
        item_id=item_id,
        new_quantity=body.new_quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, item_id: str) -> StatusResponse:
    command = RemoveCartItem(order_id=cart_id, item_id=item_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.post("/{cart_id}/checkout", response_model=CheckoutStartedResponse)
async def start_checkout(cart_id: str) -> CheckoutStartedResponse:
    try:
        current_domain.process(StartCheckout(order_id=cart_id), asynchronous=False)
    except GuardRejected as exc:
        raise HTTPException(status_code=400, detail=exc.reason) from exc
    return CheckoutStartedResponse(order_id=cart_id, checkout_url=f"/checkout/{cart_id}")


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> StatusResponse:
    try:
        current_domain.process(CancelOrder(order_id=order_id, reason=body.reason), asynchronous=False)
    except GuardRejected as exc:
        raise HTTPException(status_code=400, detail=exc.reason) from exc
    return StatusResponse()


@order_router.put("/{order_id}/complete", response_model=StatusResponse)
async def complete_order(order_id: str) -> StatusResponse:
    try:
        current_domain.process(CompleteOrder(order_id=order_id), asynchronous=False)
    except GuardRejected as exc:
        raise HTTPException(status_code=400, detail=exc.reason) from exc
    return StatusResponse()


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.get("/{order_id}")
@checkout_router.get("/{order_id}/{step_id}")
async def view_checkout(order_id: str, step_id: str | None = None, actor: Actor = Depends(current_actor)):
    """Render a checkout step, or redirect to the step the actor belongs on."""
    try:
        page = view_checkout_page(order_id, actor, step_id)
    except AccessDenied as exc:
        raise HTTPException(status_code=403, detail="Access denied") from exc
    except StepNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    if page.is_redirect:
        return RedirectResponse(step_url(order_id, page.resolution.step_id), status_code=302)
    return JSONResponse(content=page.content)


def _parse_revision(raw):
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="revision must be an integer") from exc


def _page_after_failure(order_id, actor, step_id):
    order = current_domain.repository_for(Order).get(order_id)
    try:
        page = resolve_checkout_page(order, actor, step_id)
    except AccessDenied:
        return None
    return page.content


@checkout_router.post("/{order_id}/{step_id}")
async def submit_checkout(order_id: str, step_id: str, request: Request, actor: Actor = Depends(current_actor)):
    """Submit a checkout step from form-encoded ``{pane}.{field}`` values.

    Redirects to the page the order lands on, whether it advanced or not.
    """
    form = await request.form()
    values = {key: str(value) for key, value in form.items() if "." in key}

    command = SubmitCheckoutStep(
        order_id=order_id,
        step_id=step_id,
        values=json.dumps(values),
        user_id=actor.user_id,
        session_id=actor.session_id,
        permissions=json.dumps(sorted(actor.permissions)),
        expected_revision=_parse_revision(form.get("revision")),
        op=form.get("op") or NEXT,
    )

    try:
        outcome = current_domain.process(command, asynchronous=False)
    except AccessDenied as exc:
        raise HTTPException(status_code=403, detail="Access denied") from exc
    except StepNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ConcurrencyConflict as exc:
        return JSONResponse(
            status_code=409,
            content={"error": str(exc), "revision": exc.actual_revision},
        )
    except CheckoutValidationError as exc:
        return JSONResponse(
            status_code=400,
            content={
                "error": exc.messages,
                "violations": [asdict(violation) for violation in exc.violations],
                "page": _page_after_failure(order_id, actor, step_id),
            },
        )
    except GuardRejected as exc:
        return JSONResponse(status_code=400, content={"error": {"state": [exc.reason]}})

    return RedirectResponse(step_url(order_id, outcome.step_id), status_code=302)
