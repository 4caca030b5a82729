"""
Authentication and authorization.

Two layers live here:

* request dependencies that resolve the bearer token to a ``User`` and gate
  routes by role (``require_role`` for an exact match, ``require_roles`` for
  any of a set), failing with 401/403;
* ``OwnershipPolicy``, used inside the services once the target document has
  been loaded. A policy knows how to find the owner id of a resource and
  whether admins may bypass it. A failed ownership check is a 401, not a 403.
"""
import logging
from typing import Any, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from food_ordering.core.database import get_db
from food_ordering.core.exceptions import ForbiddenError, UnauthorizedError
from food_ordering.core.security import verify_token
from food_ordering.models.user import Role, User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a freshly loaded user"""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authorized, no token")

    try:
        payload = verify_token(credentials.credentials)
    except JWTError:
        raise UnauthorizedError("Not authorized, token failed")

    user = db.get(User, payload["sub"])
    if user is None:
        raise UnauthorizedError("Not authorized, token failed")

    request.state.user = user
    return user


def require_role(role: Role) -> Callable[..., User]:
    """Only callers whose role is exactly ``role``"""

    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != role:
            raise ForbiddenError()
        return current_user

    return checker


def require_roles(*roles: Role) -> Callable[..., User]:
    """Callers whose role is any of ``roles``"""
    allowed = {Role(role).value for role in roles}

    async def checker(request: Request, _: User = Depends(get_current_user)) -> User:
        current_user = getattr(request.state, "user", None)
        if current_user is None:
            raise UnauthorizedError("Unauthorized")
        if current_user.role not in allowed:
            raise ForbiddenError()
        return current_user

    return checker


class OwnershipPolicy:
    """Who may act on a resource, given a way to find its owner.

    ``role`` restricts the owner match to actors with that role;
    ``admin_override`` lets admins through regardless of ownership.
    """

    def __init__(
        self,
        resolve_owner: Callable[[Any], Optional[str]],
        admin_override: bool = True,
        role: Optional[Role] = None,
    ):
        self.resolve_owner = resolve_owner
        self.admin_override = admin_override
        self.role = role

    def allows(self, actor: User, resource: Any) -> bool:
        if self.admin_override and actor.role == Role.ADMIN:
            return True
        if self.role is not None and actor.role != self.role:
            return False
        owner_id = self.resolve_owner(resource)
        return owner_id is not None and owner_id == actor.id

    def enforce(self, actor: User, resource: Any) -> None:
        if not self.allows(actor, resource):
            logger.info("User %s denied access to %s", actor.id, type(resource).__name__)
            raise UnauthorizedError("Not authorized")


class _AnyOf(OwnershipPolicy):
    """Passes when any of the wrapped policies passes"""

    def __init__(self, *policies: OwnershipPolicy):
        self.policies = policies

    def allows(self, actor: User, resource: Any) -> bool:
        return any(policy.allows(actor, resource) for policy in self.policies)


def any_of(*policies: OwnershipPolicy) -> OwnershipPolicy:
    return _AnyOf(*policies)


def _restaurant_owner(restaurant) -> Optional[str]:
    return restaurant.owner_id if restaurant is not None else None


# Ownership chains
RESTAURANT_OWNER = OwnershipPolicy(_restaurant_owner)
FOOD_OWNER = OwnershipPolicy(lambda food: _restaurant_owner(food.restaurant))
ORDER_RESTAURANT_OWNER = OwnershipPolicy(lambda order: _restaurant_owner(order.restaurant))
ORDER_CUSTOMER = OwnershipPolicy(lambda order: order.user_id, admin_override=False)
ORDER_VIEWER = any_of(
    OwnershipPolicy(lambda order: order.user_id),
    OwnershipPolicy(
        lambda order: _restaurant_owner(order.restaurant),
        admin_override=False,
        role=Role.RESTAURANT,
    ),
)
REVIEW_AUTHOR = OwnershipPolicy(lambda review: review.user_id, admin_override=False)
REVIEW_AUTHOR_OR_ADMIN = OwnershipPolicy(lambda review: review.user_id)
