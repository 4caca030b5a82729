"""
Orders API router
"""
from typing import Any, Dict, List
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session
from food_ordering.core.database import get_db
from food_ordering.core.permissions import get_current_user, require_role, require_roles
from food_ordering.models.order import (
    OrderCreate, OrderDetail, OrderOut, OrderWithRestaurant, OrderWithUser
)
from food_ordering.models.user import Role, User
from food_ordering.services.orders import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])

restaurant_staff = require_roles(Role.RESTAURANT, Role.ADMIN)

@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: OrderCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Create a new order"""
    return OrderService(db).create_order(order_data, current_user)

# Fixed paths are declared before /{order_id} so they are not captured by it

@router.get("/myorders", response_model=List[OrderWithRestaurant])
def get_my_orders(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Orders placed by the signed in user, newest first"""
    return OrderService(db).list_my_orders(current_user)

@router.get("/restaurant", response_model=List[OrderWithUser])
def get_restaurant_orders(
    current_user: User = Depends(require_role(Role.RESTAURANT)),
    db: Session = Depends(get_db)
) -> Any:
    """Orders received by the signed in restaurant owner, newest first"""
    return OrderService(db).list_restaurant_orders(current_user)

@router.get("/{order_id}", response_model=OrderDetail)
def get_order_details(
    order_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Get detailed order information"""
    return OrderService(db).get_order(order_id, current_user)

@router.put("/{order_id}/deliver", response_model=OrderOut)
def update_order_to_delivered(
    order_id: str,
    current_user: User = Depends(restaurant_staff),
    db: Session = Depends(get_db)
) -> Any:
    """Mark an order delivered and its payment completed"""
    return OrderService(db).mark_delivered(order_id, current_user)

@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: str,
    status_update: Dict[str, Any] = Body(..., description="OrderStatusUpdate fields"),
    current_user: User = Depends(restaurant_staff),
    db: Session = Depends(get_db)
) -> Any:
    """Update order status (restaurant owner or admin)"""
    return OrderService(db).update_order_status(order_id, status_update, current_user)

@router.put("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Cancel an order that has not started preparation (customer only)"""
    return OrderService(db).cancel_order(order_id, current_user)
