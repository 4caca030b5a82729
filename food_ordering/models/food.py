"""
Restaurant and menu data models and database schemas
"""
from datetime import datetime
from typing import Optional, List
from sqlalchemy import Column, String, Boolean, DateTime, Float, Text, JSON, ForeignKey
from sqlalchemy.orm import relationship
from pydantic import Field
from food_ordering.core.database import Base, generate_id, utcnow
from food_ordering.models.common import APIModel, IdField, ImageRef, RefField, UserSummary
from food_ordering.models.review import ReviewWithUser

# Database Models

class Restaurant(Base):
    """Restaurant database model"""
    __tablename__ = "restaurants"

    id = Column(String(32), primary_key=True, index=True, default=generate_id)
    owner_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    location = Column(Text, default="")
    cuisine_type = Column(String(100))
    opening_hours = Column(String(255))
    contact_number = Column(String(30))
    images = Column(JSON, default=list)  # [{"public_id": ..., "url": ...}] in display order
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    owner = relationship("User", back_populates="restaurants")
    foods = relationship("Food", back_populates="restaurant", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="restaurant", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="restaurant")

class Food(Base):
    """Menu item database model"""
    __tablename__ = "foods"

    id = Column(String(32), primary_key=True, index=True, default=generate_id)
    restaurant_id = Column(String(32), ForeignKey("restaurants.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    price = Column(Float, nullable=False)
    category = Column(String(100))
    is_available = Column(Boolean, nullable=False, default=True)
    images = Column(JSON, default=list)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="foods")
    reviews = relationship("Review", back_populates="food", cascade="all, delete-orphan")

# Pydantic Models for API

class RestaurantSummary(APIModel):
    id: str = IdField()
    name: str
    location: Optional[str] = None

class RestaurantOut(APIModel):
    id: str = IdField()
    owner: str = RefField("owner_id", "owner")
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    cuisine_type: Optional[str] = None
    opening_hours: Optional[str] = None
    contact_number: Optional[str] = None
    images: List[ImageRef] = []
    created_at: Optional[datetime] = None

class RestaurantListItem(RestaurantOut):
    owner: Optional[UserSummary] = None

class RestaurantUpdate(APIModel):
    """Partial update; empty values leave the stored field untouched"""
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    cuisine_type: Optional[str] = None
    opening_hours: Optional[str] = None
    contact_number: Optional[str] = None

class FoodSummary(APIModel):
    id: str = IdField()
    name: str
    price: float

class FoodOut(APIModel):
    id: str = IdField()
    restaurant: str = RefField("restaurant_id", "restaurant")
    name: str
    description: Optional[str] = None
    price: float
    category: Optional[str] = None
    is_available: bool = True
    images: List[ImageRef] = []
    created_at: Optional[datetime] = None

class FoodWithRestaurant(FoodOut):
    restaurant: Optional[RestaurantSummary] = None

class FoodCreate(APIModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: float = Field(ge=0)
    restaurant: str
    category: Optional[str] = None

class FoodUpdate(APIModel):
    """Partial update; empty values leave the stored field untouched,
    except ``is_available`` which is applied whenever it is sent"""
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    is_available: Optional[bool] = None

class RestaurantDetail(RestaurantListItem):
    foods: List[FoodOut] = []
    reviews: List[ReviewWithUser] = []
    average_rating: float = 0
