"""
Authentication API router
"""
from typing import Any
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from food_ordering.core.database import get_db
from food_ordering.core.permissions import get_current_user
from food_ordering.core.security import create_access_token
from food_ordering.models.user import AuthResponse, LoginRequest, RegisterRequest, User, UserProfile
from food_ordering.services.identity import IdentityService

router = APIRouter(prefix="/auth", tags=["authentication"])

def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(id=user.id, name=user.name, email=user.email, role=user.role, token=token)

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    user_data: RegisterRequest,
    db: Session = Depends(get_db)
) -> Any:
    """Register a new user"""
    user = IdentityService(db).register(user_data)
    return _auth_response(user, create_access_token(user.id))

@router.post("/login", response_model=AuthResponse)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db)
) -> Any:
    """Login user and return session token"""
    user, token = IdentityService(db).authenticate(credentials.email, credentials.password)
    return _auth_response(user, token)

@router.get("/me", response_model=UserProfile, response_model_exclude_unset=True)
def read_users_me(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Get current user profile"""
    return IdentityService(db).get_profile(current_user.id)
