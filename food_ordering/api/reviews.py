"""
Reviews API router
"""
from typing import Any, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from food_ordering.core.database import get_db
from food_ordering.core.permissions import get_current_user
from food_ordering.models.common import MessageResponse
from food_ordering.models.review import ReviewCreate, ReviewOut, ReviewUpdate, ReviewWithTarget, ReviewWithUser
from food_ordering.models.user import User
from food_ordering.services.reviews import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])

@router.post("", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def create_review(
    review_data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Review a restaurant or a food item"""
    return ReviewService(db).create_review(review_data, current_user)

@router.get("/restaurant/{restaurant_id}", response_model=List[ReviewWithUser])
def get_restaurant_reviews(restaurant_id: str, db: Session = Depends(get_db)) -> Any:
    return ReviewService(db).list_by_restaurant(restaurant_id)

@router.get("/food/{food_id}", response_model=List[ReviewWithUser])
def get_food_reviews(food_id: str, db: Session = Depends(get_db)) -> Any:
    return ReviewService(db).list_by_food(food_id)

@router.get("/my-reviews", response_model=List[ReviewWithTarget])
def get_my_reviews(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Reviews written by the signed in user, newest first"""
    return ReviewService(db).list_by_user(current_user.id)

@router.put("/{review_id}", response_model=ReviewOut)
def update_review(
    review_id: str,
    review_update: ReviewUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Update user's review"""
    return ReviewService(db).update_review(review_id, review_update, current_user)

@router.delete("/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Delete a review (author or admin)"""
    ReviewService(db).delete_review(review_id, current_user)
    return {"message": "Review removed"}
