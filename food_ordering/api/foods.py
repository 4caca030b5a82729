"""
Food catalog API router
"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, File, UploadFile, status
from sqlalchemy.orm import Session
from food_ordering.core.database import get_db
from food_ordering.core.permissions import require_roles
from food_ordering.models.common import MessageResponse
from food_ordering.models.food import FoodCreate, FoodOut, FoodWithRestaurant
from food_ordering.models.user import Role, User
from food_ordering.services.catalog import CatalogService
from food_ordering.services.image_storage import ImageStorage, get_image_storage

router = APIRouter(prefix="/foods", tags=["food-catalog"])

restaurant_staff = require_roles(Role.RESTAURANT, Role.ADMIN)

@router.get("", response_model=List[FoodWithRestaurant])
def get_foods(db: Session = Depends(get_db)) -> Any:
    """List every food item"""
    return CatalogService(db).list_foods()

@router.get("/restaurant/{restaurant_id}", response_model=List[FoodOut])
def get_foods_by_restaurant(restaurant_id: str, db: Session = Depends(get_db)) -> Any:
    """Menu of one restaurant"""
    return CatalogService(db).list_foods_by_restaurant(restaurant_id)

@router.get("/{food_id}", response_model=FoodWithRestaurant)
def get_food(food_id: str, db: Session = Depends(get_db)) -> Any:
    return CatalogService(db).get_food(food_id)

@router.post("", response_model=FoodOut, status_code=status.HTTP_201_CREATED)
def create_food(
    food_data: FoodCreate,
    current_user: User = Depends(restaurant_staff),
    db: Session = Depends(get_db)
) -> Any:
    """Add a food item to a restaurant menu"""
    return CatalogService(db).create_food(food_data, current_user)

@router.put("/{food_id}", response_model=FoodOut)
def update_food(
    food_id: str,
    food_update: Dict[str, Any] = Body(..., description="FoodUpdate fields"),
    current_user: User = Depends(restaurant_staff),
    db: Session = Depends(get_db)
) -> Any:
    return CatalogService(db).update_food(food_id, food_update, current_user)

@router.put("/{food_id}/images", response_model=FoodOut)
async def upload_food_images(
    food_id: str,
    images: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(restaurant_staff),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage)
) -> Any:
    return await CatalogService(db, storage).add_food_images(food_id, images or [], current_user)

@router.delete("/{food_id}/images/{image_id:path}", response_model=FoodOut)
async def delete_food_image(
    food_id: str,
    image_id: str,
    current_user: User = Depends(restaurant_staff),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage)
) -> Any:
    return await CatalogService(db, storage).delete_food_image(food_id, image_id, current_user)

@router.delete("/{food_id}", response_model=MessageResponse)
async def delete_food(
    food_id: str,
    current_user: User = Depends(restaurant_staff),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage)
) -> Any:
    """Delete a food item together with its images"""
    await CatalogService(db, storage).delete_food(food_id, current_user)
    return {"message": "Food removed"}
