from fastapi import Depends
from core.dependencies import get_current_user, CurrentUser
from core.exceptions import ForbiddenError
from utils.logger import get_logger

logger = get_logger("Authorization")

ROLE_USER = "user"
ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"
RESTAURANT_CREATOR_ROLES = (ROLE_OWNER, ROLE_ADMIN)

def require_role(*allowed_roles):
    async def _dependency(current_user: CurrentUser = Depends(get_current_user)):
        if current_user.role not in allowed_roles:
            logger.warning(f"Forbidden: {current_user.email} role {current_user.role} not in allowed {allowed_roles}")
            raise ForbiddenError(f"Le rôle {current_user.role} n'est pas autorisé à accéder à cette route")
        return current_user
    return _dependency

def is_owner_or_admin(owner_id, user: CurrentUser) -> bool:
    if user.role == ROLE_ADMIN:
        return True
    return owner_id is not None and str(owner_id) == user.id

def ensure_can_create_restaurant(user: CurrentUser):
    if user.role not in RESTAURANT_CREATOR_ROLES:
        logger.warning(f"Forbidden: {user.email} ({user.role}) tried to create a restaurant")
        raise ForbiddenError("Seuls les propriétaires et les administrateurs peuvent créer des restaurants")

def ensure_restaurant_access(restaurant: dict, user: CurrentUser, message: str):
    """Owner of the restaurant or admin, else 403 with ``message``."""
    if not is_owner_or_admin(restaurant.get("owner"), user):
        logger.warning(f"Forbidden: {user.email} is not owner of restaurant {restaurant.get('_id')}")
        raise ForbiddenError(message)
