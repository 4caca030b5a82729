"""
Database models and API schemas
"""
from food_ordering.models.review import Review
from food_ordering.models.food import Restaurant, Food
from food_ordering.models.user import User, Role
from food_ordering.models.order import Order, OrderItem, OrderStatus, PaymentStatus

__all__ = [
    "Food",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "Restaurant",
    "Review",
    "Role",
    "User",
]
