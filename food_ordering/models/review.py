"""
Review data models and database schemas
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from pydantic import Field
from food_ordering.core.database import Base, generate_id, utcnow
from food_ordering.models.common import APIModel, IdField, NamedRef, RefField

# Database Models

class Review(Base):
    """Review of either a restaurant or a single food item"""
    __tablename__ = "reviews"
    __table_args__ = (
        # NULL targets never collide, so each constraint only bites for its own kind of review
        UniqueConstraint("user_id", "restaurant_id", name="uq_review_user_restaurant"),
        UniqueConstraint("user_id", "food_id", name="uq_review_user_food"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
    )

    id = Column(String(32), primary_key=True, index=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    restaurant_id = Column(String(32), ForeignKey("restaurants.id"), index=True)
    food_id = Column(String(32), ForeignKey("foods.id"), index=True)
    rating = Column(Integer, nullable=False)  # 1-5 stars
    comment = Column(Text)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    user = relationship("User", back_populates="reviews")
    restaurant = relationship("Restaurant", back_populates="reviews")
    food = relationship("Food", back_populates="reviews")

# Pydantic Models for API

class ReviewCreate(APIModel):
    restaurant: Optional[str] = None
    food: Optional[str] = None
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None

class ReviewUpdate(APIModel):
    # 0 and "" mean "keep the current value"
    rating: Optional[int] = Field(None, ge=0, le=5)
    comment: Optional[str] = None

class ReviewOut(APIModel):
    id: str = IdField()
    user: str = RefField("user_id", "user")
    restaurant: Optional[str] = RefField("restaurant_id", "restaurant", None)
    food: Optional[str] = RefField("food_id", "food", None)
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

class ReviewWithUser(ReviewOut):
    user: Optional[NamedRef] = None

class ReviewWithTarget(ReviewOut):
    restaurant: Optional[NamedRef] = None
    food: Optional[NamedRef] = None
