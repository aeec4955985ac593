"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from checkout.domain import checkout


@checkout.event(part_of="Order")
class CartCreated:
    """A new cart was opened for a customer or a guest session."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier()
    session_id = String()
    created_at = DateTime(required=True)


@checkout.event(part_of="Order")
class OrderItemAdded:
    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_total = Float(required=True)


@checkout.event(part_of="Order")
class OrderItemQuantityUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    new_total = Float(required=True)


@checkout.event(part_of="Order")
class OrderItemRemoved:
    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_total = Float(required=True)


@checkout.event(part_of="Order")
class OrderStateChanged:
    """A workflow transition was applied to the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    transition = String(required=True)
    from_state = String(required=True)
    to_state = String(required=True)
    changed_at = DateTime(required=True)


@checkout.event(part_of="Order")
class CheckoutStepChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    from_step = String()
    to_step = String(required=True)


@checkout.event(part_of="Order")
class CustomerAssigned:
    """A guest order was attached to a registered or returning customer."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    email = String()


@checkout.event(part_of="Order")
class ContactEmailRecorded:
    __version__ = 1

    order_id = Identifier(required=True)
    email = String(required=True)


@checkout.event(part_of="Order")
class PaymentCaptured:
    __version__ = 1

    order_id = Identifier(required=True)
    receipt_id = String(required=True)
    amount = Float(required=True)
    currency = String(required=True)


@checkout.event(part_of="Order")
class OrderPlaced:
    """Checkout finished: the order has a number and is no longer a cart."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = Integer(required=True)
    customer_id = Identifier()
    email = String()
    total_price = Float(required=True)
    currency = String(required=True)
    placed_at = DateTime(required=True)
