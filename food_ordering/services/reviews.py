"""
Reviews of restaurants and food items
"""
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from food_ordering.core.exceptions import BadRequestError, ConflictError, NotFoundError
from food_ordering.core.permissions import REVIEW_AUTHOR, REVIEW_AUTHOR_OR_ADMIN
from food_ordering.models.food import Food, Restaurant
from food_ordering.models.review import Review, ReviewCreate, ReviewUpdate
from food_ordering.models.user import User
from food_ordering.services.catalog import apply_partial_update

logger = logging.getLogger(__name__)


class ReviewService:
    """Review store operations.

    A user holds at most one review per restaurant and one per food item.
    The check below gives a friendly error; the unique constraints on the
    table settle concurrent duplicates.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_review_or_404(self, review_id: str) -> Review:
        review = self.db.get(Review, review_id)
        if review is None:
            raise NotFoundError("Review not found")
        return review

    def create_review(self, data: ReviewCreate, actor: User) -> Review:
        restaurant_id = data.restaurant or None
        food_id = data.food or None
        if bool(restaurant_id) == bool(food_id):
            raise BadRequestError("Provide either restaurant or food ID")

        existing = self.db.query(Review).filter(Review.user_id == actor.id)
        if restaurant_id:
            existing = existing.filter(Review.restaurant_id == restaurant_id)
        else:
            existing = existing.filter(Review.food_id == food_id)
        if existing.first() is not None:
            raise ConflictError("You have already reviewed this item")

        if restaurant_id and self.db.get(Restaurant, restaurant_id) is None:
            raise NotFoundError("Restaurant not found")
        if food_id and self.db.get(Food, food_id) is None:
            raise NotFoundError("Food not found")

        review = Review(
            user_id=actor.id,
            restaurant_id=restaurant_id,
            food_id=food_id,
            rating=data.rating,
            comment=data.comment,
        )
        self.db.add(review)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("You have already reviewed this item")

        self.db.refresh(review)
        return review

    def list_by_restaurant(self, restaurant_id: str) -> List[Review]:
        return (
            self.db.query(Review)
            .options(joinedload(Review.user))
            .filter(Review.restaurant_id == restaurant_id)
            .order_by(Review.created_at.desc())
            .all()
        )

    def list_by_food(self, food_id: str) -> List[Review]:
        return (
            self.db.query(Review)
            .options(joinedload(Review.user))
            .filter(Review.food_id == food_id)
            .order_by(Review.created_at.desc())
            .all()
        )

    def list_by_user(self, user_id: str) -> List[Review]:
        return (
            self.db.query(Review)
            .options(joinedload(Review.restaurant), joinedload(Review.food))
            .filter(Review.user_id == user_id)
            .order_by(Review.created_at.desc())
            .all()
        )

    def update_review(self, review_id: str, changes: ReviewUpdate, actor: User) -> Review:
        review = self.get_review_or_404(review_id)
        REVIEW_AUTHOR.enforce(actor, review)

        apply_partial_update(review, changes.model_dump(exclude_unset=True))
        self.db.commit()
        self.db.refresh(review)
        return review

    def delete_review(self, review_id: str, actor: User) -> None:
        review = self.get_review_or_404(review_id)
        REVIEW_AUTHOR_OR_ADMIN.enforce(actor, review)

        self.db.delete(review)
        self.db.commit()
