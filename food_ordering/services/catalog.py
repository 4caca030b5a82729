"""
Restaurants and their menus
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import UploadFile
from sqlalchemy.orm import Session, joinedload
from starlette.concurrency import run_in_threadpool

from food_ordering.core.config import settings
from food_ordering.core.exceptions import BadRequestError, NotFoundError, validate_body
from food_ordering.core.permissions import FOOD_OWNER, RESTAURANT_OWNER
from food_ordering.models.food import (
    Food, FoodCreate, FoodUpdate, Restaurant, RestaurantDetail, RestaurantUpdate
)
from food_ordering.models.user import User
from food_ordering.services.image_storage import ImageStorage

logger = logging.getLogger(__name__)


def apply_partial_update(target: Any, changes: Dict[str, Any]) -> None:
    """Copy truthy values onto ``target``.

    Empty strings, zero and None all count as "not sent" and keep the
    stored value.
    """
    for field, value in changes.items():
        if value:
            setattr(target, field, value)


def calculate_average_rating(reviews: Sequence) -> float:
    if not reviews:
        return 0
    return sum(review.rating for review in reviews) / len(reviews)


class CatalogService:
    """Catalog store operations"""

    def __init__(self, db: Session, storage: Optional[ImageStorage] = None):
        self.db = db
        self.storage = storage

    # Restaurants

    def list_restaurants(self) -> List[Restaurant]:
        return self.db.query(Restaurant).options(joinedload(Restaurant.owner)).all()

    def get_restaurant_or_404(self, restaurant_id: str) -> Restaurant:
        restaurant = self.db.get(Restaurant, restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        return restaurant

    def get_restaurant(self, restaurant_id: str) -> RestaurantDetail:
        """Restaurant with its menu, reviews and average rating"""
        restaurant = self.get_restaurant_or_404(restaurant_id)
        detail = RestaurantDetail.model_validate(restaurant)
        detail.average_rating = calculate_average_rating(restaurant.reviews)
        return detail

    def update_restaurant(self, restaurant_id: str, changes: Dict[str, Any], actor: User) -> Restaurant:
        restaurant = self.get_restaurant_or_404(restaurant_id)
        RESTAURANT_OWNER.enforce(actor, restaurant)

        update = validate_body(RestaurantUpdate, changes)
        apply_partial_update(restaurant, update.model_dump(exclude_unset=True))
        self.db.commit()
        self.db.refresh(restaurant)
        return restaurant

    async def add_restaurant_images(self, restaurant_id: str, files: List[UploadFile], actor: User) -> Restaurant:
        restaurant = self.get_restaurant_or_404(restaurant_id)
        RESTAURANT_OWNER.enforce(actor, restaurant)
        return await self._attach_images(restaurant, files)

    async def delete_restaurant_image(self, restaurant_id: str, image_id: str, actor: User) -> Restaurant:
        restaurant = self.get_restaurant_or_404(restaurant_id)
        RESTAURANT_OWNER.enforce(actor, restaurant)
        return await self._detach_image(restaurant, image_id)

    # Foods

    def list_foods(self) -> List[Food]:
        return self.db.query(Food).options(joinedload(Food.restaurant)).all()

    def list_foods_by_restaurant(self, restaurant_id: str) -> List[Food]:
        return self.db.query(Food).filter(Food.restaurant_id == restaurant_id).all()

    def get_food(self, food_id: str) -> Food:
        food = self.db.get(Food, food_id)
        if food is None:
            raise NotFoundError("Food not found")
        return food

    def create_food(self, data: FoodCreate, actor: User) -> Food:
        restaurant = self.get_restaurant_or_404(data.restaurant)
        RESTAURANT_OWNER.enforce(actor, restaurant)

        food = Food(
            name=data.name,
            description=data.description,
            price=data.price,
            restaurant_id=restaurant.id,
            category=data.category,
        )
        self.db.add(food)
        self.db.commit()
        self.db.refresh(food)
        logger.info("Created food %s in restaurant %s", food.id, restaurant.id)
        return food

    def update_food(self, food_id: str, changes: Dict[str, Any], actor: User) -> Food:
        food = self.get_food(food_id)
        FOOD_OWNER.enforce(actor, food)

        update_data = validate_body(FoodUpdate, changes).model_dump(exclude_unset=True)
        is_available = update_data.pop("is_available", None)
        apply_partial_update(food, update_data)
        # Availability is a flag, so an explicit false must stick
        if is_available is not None:
            food.is_available = is_available

        self.db.commit()
        self.db.refresh(food)
        return food

    async def add_food_images(self, food_id: str, files: List[UploadFile], actor: User) -> Food:
        food = self.get_food(food_id)
        FOOD_OWNER.enforce(actor, food)
        return await self._attach_images(food, files)

    async def delete_food_image(self, food_id: str, image_id: str, actor: User) -> Food:
        food = self.get_food(food_id)
        FOOD_OWNER.enforce(actor, food)
        return await self._detach_image(food, image_id)

    async def delete_food(self, food_id: str, actor: User) -> None:
        food = self.get_food(food_id)
        FOOD_OWNER.enforce(actor, food)

        public_ids = [image["public_id"] for image in food.images or []]
        if public_ids:
            await self.storage.destroy_many(public_ids)

        self.db.delete(food)
        self.db.commit()
        logger.info("Deleted food %s", food_id)

    # Images

    def _validate_uploads(self, files: List[UploadFile]) -> None:
        if not files:
            raise BadRequestError("No files uploaded")
        if len(files) > settings.MAX_IMAGES_PER_UPLOAD:
            raise BadRequestError(
                f"Too many files, at most {settings.MAX_IMAGES_PER_UPLOAD} images per upload"
            )
        for file in files:
            if file.content_type not in settings.ALLOWED_IMAGE_TYPES:
                raise BadRequestError(f"Unsupported image type: {file.content_type}")

    async def _attach_images(self, document, files: List[UploadFile]):
        self._validate_uploads(files)
        uploaded = await self.storage.upload_many(files)

        document.images = list(document.images or []) + uploaded
        self.db.commit()
        self.db.refresh(document)
        return document

    async def _detach_image(self, document, image_id: str):
        images = list(document.images or [])
        index = next(
            (i for i, image in enumerate(images) if image.get("public_id") == image_id),
            None,
        )
        if index is None:
            raise NotFoundError("Image not found")

        await run_in_threadpool(self.storage.destroy, image_id)

        del images[index]
        document.images = images
        self.db.commit()
        self.db.refresh(document)
        return document
