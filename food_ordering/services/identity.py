"""
User accounts: registration, login and profiles
"""
import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from food_ordering.core.database import unit_of_work
from food_ordering.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from food_ordering.core.security import create_access_token, get_password_hash, verify_password
from food_ordering.models.food import Restaurant, RestaurantOut
from food_ordering.models.user import RegisterRequest, Role, User, UserProfile

logger = logging.getLogger(__name__)


class IdentityService:
    """Identity store operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def register(self, data: RegisterRequest) -> User:
        """Create a user; restaurant accounts get a restaurant in the same transaction"""
        if self.get_by_email(data.email):
            raise ConflictError("User already exists")

        role = data.role or Role.USER
        try:
            with unit_of_work(self.db):
                user = User(
                    name=data.name,
                    email=data.email,
                    hashed_password=get_password_hash(data.password),
                    role=role.value,
                    address=data.address,
                    phone=data.phone,
                )
                self.db.add(user)
                self.db.flush()

                if role == Role.RESTAURANT:
                    self.db.add(Restaurant(
                        name=f"{user.name}'s Restaurant",
                        owner_id=user.id,
                        location=user.address or "",
                    ))
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            raise ConflictError("User already exists")

        self.db.refresh(user)
        logger.info("Registered %s user %s", user.role, user.id)
        return user

    def authenticate(self, email: str, password: str) -> Tuple[User, str]:
        """Check credentials and issue a session token"""
        user = self.get_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            logger.warning("Failed login for %s", email)
            raise UnauthorizedError("Invalid credentials")

        logger.info("User %s logged in", user.id)
        return user, create_access_token(user.id)

    def get_profile(self, user_id: str) -> UserProfile:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")

        profile = UserProfile.model_validate(user)
        if user.role == Role.RESTAURANT:
            restaurant = self.db.query(Restaurant).filter(Restaurant.owner_id == user.id).first()
            profile.restaurant = RestaurantOut.model_validate(restaurant) if restaurant else None
        return profile
