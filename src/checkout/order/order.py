"""Order aggregate. A shopping cart that becomes an order when checkout places it.

The order owns its line items and is the only writer of its ``state`` and
``checkout_step``. Callers request changes through methods; workflow
transitions are evaluated by ``order_workflow`` and written here.

Every persisted change bumps ``revision`` so concurrent step submissions can
be detected (optimistic concurrency).
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from checkout.domain import checkout
from checkout.exceptions import ConcurrencyConflict
from checkout.order.events import (
    CartCreated,
    CheckoutStepChanged,
    ContactEmailRecorded,
    CustomerAssigned,
    OrderItemAdded,
    OrderItemQuantityUpdated,
    OrderItemRemoved,
    OrderPlaced,
    OrderStateChanged,
    PaymentCaptured,
)
from checkout.workflow.order_workflow import FINISHED_STATES, OrderState, order_workflow

_OPEN_STATES = {OrderState.DRAFT.value, OrderState.IN_CHECKOUT.value}


@checkout.entity(part_of="Order")
class OrderItem:
    """A purchased product variation with its quantity and unit price."""

    variant_id = Identifier(required=True)
    sku = String(required=True, max_length=50)
    title = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def total_price(self):
        return self.unit_price * self.quantity


@checkout.aggregate
class Order:
    customer_id = Identifier()  # Null for guest orders
    session_id = String(max_length=255)  # Binds a guest order to its browser session
    email = String(max_length=254)
    billing_profile_id = Identifier()
    shipping_profile_id = Identifier()
    items = HasMany(OrderItem)
    total_price = Float(default=0.0)
    currency = String(max_length=3, default="USD")
    state = String(choices=OrderState, default=OrderState.DRAFT.value)
    checkout_step = String(max_length=50)
    order_number = Integer()
    payment_receipt_id = String(max_length=255)
    is_cart = Boolean(default=True)
    revision = Integer(default=0)
    placed_at = DateTime()
    completed_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def checkout_requires_line_items(self):
        if self.state == OrderState.IN_CHECKOUT.value and not self.items:
            raise ValidationError({"items": ["An order without line items cannot be in checkout"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id=None, session_id=None, email=None, currency="USD"):
        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            session_id=session_id,
            email=email,
            currency=currency or "USD",
            state=OrderState.DRAFT.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            CartCreated(
                order_id=str(order.id),
                customer_id=str(customer_id) if customer_id else None,
                session_id=session_id,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def is_guest(self):
        return not self.customer_id

    @property
    def is_finished(self):
        """True once checkout is over (placed or completed)."""
        return self.state in FINISHED_STATES

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items)

    def _touch(self):
        self.updated_at = datetime.now(UTC)
        self.revision = (self.revision or 0) + 1

    def _recalculate_total(self):
        self.total_price = sum(item.total_price for item in self.items)

    def _assert_open(self, action):
        if self.state not in _OPEN_STATES:
            raise ValidationError({"state": [f"Cannot {action} an order in the {self.state} state"]})

    def _find_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ValidationError({"item_id": ["Item not found"]})
        return item

    def check_revision(self, expected_revision):
        """Reject a change based on a stale read of this order."""
        if expected_revision is not None and expected_revision != self.revision:
            raise ConcurrencyConflict(str(self.id), expected_revision, self.revision)

    # -------------------------------------------------------------------
    # Cart operations
    # -------------------------------------------------------------------
    def add_item(self, variant_id, sku, title, quantity, unit_price):
        """Add a line item, or increase the quantity of the same variation."""
        self._assert_open("add items to")

        existing = next((i for i in self.items if str(i.variant_id) == str(variant_id)), None)
        if existing:
            existing.quantity += quantity
            item = existing
        else:
            item = OrderItem(
                variant_id=variant_id,
                sku=sku,
                title=title,
                quantity=quantity,
                unit_price=unit_price,
            )
            self.add_items(item)

        self._recalculate_total()
        self._touch()

        self.raise_(
            OrderItemAdded(
                order_id=str(self.id),
                item_id=str(item.id),
                variant_id=str(variant_id),
                quantity=quantity,
                new_total=self.total_price,
            )
        )
        return item

    def update_item_quantity(self, item_id, new_quantity):
        self._assert_open("change items of")
        if new_quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self._find_item(item_id)
        previous_quantity = item.quantity
        item.quantity = new_quantity
        self._recalculate_total()
        self._touch()

        self.raise_(
            OrderItemQuantityUpdated(
                order_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                new_total=self.total_price,
            )
        )

    def remove_item(self, item_id):
        """Remove a line item. An in-checkout order left empty goes back to the cart."""
        self._assert_open("remove items from")
        item = self._find_item(item_id)

        with atomic_change(self):
            self.remove_items(item)
            self._recalculate_total()
            if not self.items and self.state == OrderState.IN_CHECKOUT.value:
                self.apply_transition("return_to_cart")
                self.checkout_step = None
            self._touch()

        self.raise_(
            OrderItemRemoved(
                order_id=str(self.id),
                item_id=str(item_id),
                new_total=self.total_price,
            )
        )

    # -------------------------------------------------------------------
    # Workflow
    # -------------------------------------------------------------------
    def apply_transition(self, name):
        """Apply the named workflow transition, raising GuardRejected when blocked."""
        transition = order_workflow.get_transition(name)
        new_state = order_workflow.apply_transition(self, transition)

        previous_state = self.state
        self.state = new_state
        self._touch()

        self.raise_(
            OrderStateChanged(
                order_id=str(self.id),
                transition=transition.name,
                from_state=previous_state,
                to_state=new_state,
                changed_at=datetime.now(UTC),
            )
        )
        return new_state

    def place(self, order_number):
        """Place the order: assign its number and stop treating it as a cart."""
        self.apply_transition("place")

        now = datetime.now(UTC)
        self.order_number = order_number
        self.placed_at = now
        self.is_cart = False

        self.raise_(
            OrderPlaced(
                order_id=str(self.id),
                order_number=order_number,
                customer_id=str(self.customer_id) if self.customer_id else None,
                email=self.email,
                total_price=self.total_price,
                currency=self.currency,
                placed_at=now,
            )
        )

    def cancel(self):
        self.apply_transition("cancel")
        self.is_cart = False

    def complete(self):
        self.apply_transition("complete")
        self.completed_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Checkout progress
    # -------------------------------------------------------------------
    def move_to_step(self, step_id):
        if step_id == self.checkout_step:
            return

        previous_step = self.checkout_step
        self.checkout_step = step_id
        self._touch()

        self.raise_(
            CheckoutStepChanged(
                order_id=str(self.id),
                from_step=previous_step,
                to_step=step_id,
            )
        )

    def record_contact_email(self, email):
        self._assert_open("change the contact e-mail of")
        self.email = email
        self._touch()
        self.raise_(ContactEmailRecorded(order_id=str(self.id), email=email))

    def assign_customer(self, customer_id, email=None):
        self._assert_open("assign a customer to")
        self.customer_id = customer_id
        if email:
            self.email = email
        self._touch()
        self.raise_(
            CustomerAssigned(
                order_id=str(self.id),
                customer_id=str(customer_id),
                email=self.email,
            )
        )

    def attach_billing_profile(self, profile_id):
        self._assert_open("change the billing profile of")
        self.billing_profile_id = profile_id
        self._touch()

    def attach_shipping_profile(self, profile_id):
        self._assert_open("change the shipping profile of")
        self.shipping_profile_id = profile_id
        self._touch()

    def record_payment(self, receipt_id, amount):
        self._assert_open("record a payment for")
        self.payment_receipt_id = receipt_id
        self._touch()
        self.raise_(
            PaymentCaptured(
                order_id=str(self.id),
                receipt_id=receipt_id,
                amount=amount,
                currency=self.currency,
            )
        )
