"""
Order management data models and database schemas
"""
from datetime import datetime
from typing import Optional, List
from sqlalchemy import Column, Integer, String, DateTime, Float, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from pydantic import Field
import enum
from food_ordering.core.database import Base, generate_id, utcnow
from food_ordering.models.common import APIModel, IdField, NamedRef, RefField, UserSummary
from food_ordering.models.food import FoodSummary, RestaurantSummary

# Enums

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

# Database Models

class Order(Base):
    """Order database model"""
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, index=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    restaurant_id = Column(String(32), ForeignKey("restaurants.id"), nullable=False, index=True)

    total_amount = Column(Float, nullable=False)
    delivery_address = Column(Text, nullable=False)
    payment_method = Column(String(50), nullable=False)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    payment_status = Column(Enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="orders")
    restaurant = relationship("Restaurant", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )

class OrderItem(Base):
    """Order line item with the unit price captured when the order was placed"""
    __tablename__ = "order_items"

    id = Column(String(32), primary_key=True, index=True, default=generate_id)
    order_id = Column(String(32), ForeignKey("orders.id"), nullable=False, index=True)
    food_id = Column(String(32), ForeignKey("foods.id", ondelete="SET NULL"))
    position = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Float, nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
    food = relationship("Food")

# Pydantic Models for API

class OrderItemCreate(APIModel):
    food: str
    quantity: int = Field(1, ge=1)

class OrderCreate(APIModel):
    items: List[OrderItemCreate] = []
    delivery_address: str = Field(min_length=1)
    payment_method: str = Field(min_length=1)

class OrderStatusUpdate(APIModel):
    # Checked by the order service so that unknown values get a domain error
    status: str

class OrderItemOut(APIModel):
    food: Optional[str] = RefField("food_id", "food", None)
    quantity: int
    price: float

class OrderItemDetail(OrderItemOut):
    food: Optional[FoodSummary] = None

class OrderOut(APIModel):
    id: str = IdField()
    user: str = RefField("user_id", "user")
    restaurant: str = RefField("restaurant_id", "restaurant")
    items: List[OrderItemOut] = []
    total_amount: float
    delivery_address: str
    payment_method: str
    status: OrderStatus
    payment_status: PaymentStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class OrderWithRestaurant(OrderOut):
    """Customer's view in order history"""
    restaurant: Optional[RestaurantSummary] = None

class OrderWithUser(OrderOut):
    """Restaurant's view of incoming orders"""
    user: Optional[NamedRef] = None

class OrderDetail(OrderOut):
    user: Optional[UserSummary] = None
    restaurant: Optional[RestaurantSummary] = None
    items: List[OrderItemDetail] = []
