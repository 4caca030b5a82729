"""
Restaurants API router
"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, File, UploadFile
from sqlalchemy.orm import Session
from food_ordering.core.database import get_db
from food_ordering.core.permissions import require_roles
from food_ordering.models.food import RestaurantDetail, RestaurantListItem, RestaurantOut
from food_ordering.models.user import Role, User
from food_ordering.services.catalog import CatalogService
from food_ordering.services.image_storage import ImageStorage, get_image_storage

router = APIRouter(prefix="/restaurants", tags=["restaurants"])

restaurant_staff = require_roles(Role.RESTAURANT, Role.ADMIN)

@router.get("", response_model=List[RestaurantListItem])
def get_restaurants(db: Session = Depends(get_db)) -> Any:
    """List all restaurants with their owners"""
    return CatalogService(db).list_restaurants()

@router.get("/{restaurant_id}", response_model=RestaurantDetail)
def get_restaurant(restaurant_id: str, db: Session = Depends(get_db)) -> Any:
    """Restaurant with its menu, reviews and average rating"""
    return CatalogService(db).get_restaurant(restaurant_id)

@router.put("/{restaurant_id}", response_model=RestaurantOut)
def update_restaurant(
    restaurant_id: str,
    restaurant_update: Dict[str, Any] = Body(..., description="RestaurantUpdate fields"),
    current_user: User = Depends(restaurant_staff),
    db: Session = Depends(get_db)
) -> Any:
    """Update restaurant details (owner or admin)"""
    return CatalogService(db).update_restaurant(restaurant_id, restaurant_update, current_user)

@router.put("/{restaurant_id}/images", response_model=RestaurantOut)
async def upload_restaurant_images(
    restaurant_id: str,
    images: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(restaurant_staff),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage)
) -> Any:
    """Append uploaded images to the restaurant gallery"""
    return await CatalogService(db, storage).add_restaurant_images(restaurant_id, images or [], current_user)

@router.delete("/{restaurant_id}/images/{image_id:path}", response_model=RestaurantOut)
async def delete_restaurant_image(
    restaurant_id: str,
    image_id: str,
    current_user: User = Depends(restaurant_staff),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage)
) -> Any:
    """Remove one image from the gallery and the remote host"""
    return await CatalogService(db, storage).delete_restaurant_image(restaurant_id, image_id, current_user)
