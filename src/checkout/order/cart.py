"""Cart operations — commands and handler.

A cart is an order that has not been placed yet. Guests are identified by
their session id, registered customers by their customer id.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.order.order import Order


@checkout.command(part_of="Order")
class CreateCart:
    customer_id = Identifier()
    session_id = String(max_length=255)
    email = String(max_length=254)
    currency = String(max_length=3, default="USD")


@checkout.command(part_of="Order")
class AddCartItem:
    order_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    sku = String(required=True, max_length=50)
    title = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)


@checkout.command(part_of="Order")
class UpdateCartItemQuantity:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=1)


@checkout.command(part_of="Order")
class RemoveCartItem:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)


@checkout.command_handler(part_of=Order)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        order = Order.create(
            customer_id=command.customer_id,
            session_id=command.session_id,
            email=command.email,
            currency=command.currency,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)

    @handle(AddCartItem)
    def add_cart_item(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        item = order.add_item(
            variant_id=command.variant_id,
            sku=command.sku,
            title=command.title,
            quantity=command.quantity,
            unit_price=command.unit_price,
        )
        repo.add(order)
        return str(item.id)

    @handle(UpdateCartItemQuantity)
    def update_cart_item_quantity(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_item_quantity(item_id=command.item_id, new_quantity=command.new_quantity)
        repo.add(order)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.remove_item(item_id=command.item_id)
        repo.add(order)
