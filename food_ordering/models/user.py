"""
User data models and database schemas
"""
import enum
from datetime import datetime
from typing import Optional
from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.orm import relationship
from pydantic import EmailStr, Field
from food_ordering.core.database import Base, generate_id, utcnow
from food_ordering.models.common import APIModel, IdField
from food_ordering.models.food import RestaurantOut

class Role(str, enum.Enum):
    USER = "user"
    RESTAURANT = "restaurant"
    ADMIN = "admin"

# Database Models

class User(Base):
    """User database model"""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, index=True, default=generate_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.USER.value)  # fixed at registration
    address = Column(Text)
    phone = Column(String(30))
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    restaurants = relationship("Restaurant", back_populates="owner")
    orders = relationship("Order", back_populates="user")
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan")

# Pydantic Models for API

class RegisterRequest(APIModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Optional[Role] = None
    address: Optional[str] = None
    phone: Optional[str] = None

class LoginRequest(APIModel):
    email: EmailStr
    password: str

class AuthResponse(APIModel):
    """Returned by register and login"""
    id: str = IdField()
    name: str
    email: str
    role: Role
    token: str

class UserOut(APIModel):
    id: str = IdField()
    name: str
    email: str
    role: Role
    address: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None

class UserProfile(UserOut):
    """Profile of the signed in user; restaurant accounts carry their restaurant"""
    restaurant: Optional[RestaurantOut] = None
