"""
Order lifecycle: placement, status changes, cancellation and access rules.

Status values are ``pending -> confirmed -> preparing -> out_for_delivery ->
delivered`` plus ``cancelled``. The restaurant side may move an order to any
of the first five values in any order; the customer may cancel only while the
order is still ``pending`` or ``confirmed``.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session, joinedload, selectinload

from food_ordering.core.exceptions import BadRequestError, NotFoundError, validate_body
from food_ordering.core.permissions import ORDER_CUSTOMER, ORDER_RESTAURANT_OWNER, ORDER_VIEWER
from food_ordering.models.food import Food, Restaurant
from food_ordering.models.order import (
    Order, OrderCreate, OrderItem, OrderStatus, OrderStatusUpdate, PaymentStatus
)
from food_ordering.models.user import User

logger = logging.getLogger(__name__)

# Values accepted by the restaurant-side status update; cancelling has its own path
ASSIGNABLE_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)

CANCELLABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.CONFIRMED)


def parse_assignable_status(value: str) -> OrderStatus:
    for status in ASSIGNABLE_STATUSES:
        if status.value == value:
            return status
    raise BadRequestError("Invalid status")


class OrderService:
    """Order engine"""

    def __init__(self, db: Session):
        self.db = db

    def get_order_or_404(self, order_id: str) -> Order:
        order = self.db.get(Order, order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def create_order(self, data: OrderCreate, actor: User) -> Order:
        """Price the cart from the current menu and place the order.

        Every item is checked before anything is written, so a missing or
        unavailable food leaves no trace. Unit prices are copied onto the
        line items and later menu changes do not touch them.
        """
        if not data.items:
            raise BadRequestError("No order items")

        total_amount = 0.0
        order_items = []
        foods = []

        for position, item in enumerate(data.items):
            food = self.db.get(Food, item.food)
            if food is None:
                raise NotFoundError(f"Food not found: {item.food}")
            if not food.is_available:
                raise BadRequestError(f"Food not available: {food.name}")

            total_amount += food.price * item.quantity
            foods.append(food)
            order_items.append(OrderItem(
                food_id=food.id,
                position=position,
                quantity=item.quantity,
                price=food.price,
            ))

        # The first item decides which restaurant receives the order
        restaurant_id = foods[0].restaurant_id
        if any(food.restaurant_id != restaurant_id for food in foods[1:]):
            logger.warning(
                "Order by user %s mixes items from several restaurants; assigning to %s",
                actor.id, restaurant_id,
            )

        order = Order(
            user_id=actor.id,
            restaurant_id=restaurant_id,
            items=order_items,
            total_amount=total_amount,
            delivery_address=data.delivery_address,
            payment_method=data.payment_method,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
        )
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)

        logger.info("Order %s placed by user %s, total %.2f", order.id, actor.id, total_amount)
        return order

    def get_order(self, order_id: str, actor: User) -> Order:
        order = (
            self.db.query(Order)
            .options(
                joinedload(Order.user),
                joinedload(Order.restaurant),
                selectinload(Order.items).joinedload(OrderItem.food),
            )
            .filter(Order.id == order_id)
            .first()
        )
        if order is None:
            raise NotFoundError("Order not found")

        ORDER_VIEWER.enforce(actor, order)
        return order

    def list_my_orders(self, actor: User) -> List[Order]:
        return (
            self.db.query(Order)
            .options(joinedload(Order.restaurant))
            .filter(Order.user_id == actor.id)
            .order_by(Order.created_at.desc())
            .all()
        )

    def list_restaurant_orders(self, actor: User) -> List[Order]:
        restaurant = self.db.query(Restaurant).filter(Restaurant.owner_id == actor.id).first()
        if restaurant is None:
            raise NotFoundError("Restaurant not found")

        return (
            self.db.query(Order)
            .options(joinedload(Order.user))
            .filter(Order.restaurant_id == restaurant.id)
            .order_by(Order.created_at.desc())
            .all()
        )

    def update_order_status(self, order_id: str, changes: Dict[str, Any], actor: User) -> Order:
        """Set any non-cancelled status; no ordering between states is enforced"""
        order = self.get_order_or_404(order_id)
        ORDER_RESTAURANT_OWNER.enforce(actor, order)
        new_status = parse_assignable_status(validate_body(OrderStatusUpdate, changes).status)

        old_status = order.status
        order.status = new_status
        self.db.commit()
        self.db.refresh(order)

        logger.info("Order %s status %s -> %s by user %s", order.id, old_status.value, new_status.value, actor.id)
        return order

    def mark_delivered(self, order_id: str, actor: User) -> Order:
        order = self.get_order_or_404(order_id)
        ORDER_RESTAURANT_OWNER.enforce(actor, order)

        order.status = OrderStatus.DELIVERED
        order.payment_status = PaymentStatus.COMPLETED
        self.db.commit()
        self.db.refresh(order)

        logger.info("Order %s delivered", order.id)
        return order

    def cancel_order(self, order_id: str, actor: User) -> Order:
        order = self.get_order_or_404(order_id)
        ORDER_CUSTOMER.enforce(actor, order)

        if order.status not in CANCELLABLE_STATUSES:
            raise BadRequestError("Order cannot be cancelled at this stage")

        order.status = OrderStatus.CANCELLED
        self.db.commit()
        self.db.refresh(order)

        logger.info("Order %s cancelled by user %s", order.id, actor.id)
        return order
