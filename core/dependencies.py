from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from typing import Optional
from core.exceptions import UnauthorizedError
from db.db_operation import MongoConnection, get_db
from utils.jwt_handler import decode_access_token
from utils.serializers import to_object_id
from utils.logger import get_logger

logger = get_logger("Dependencies")

TOKEN_COOKIE = "token"

# auto_error off: the token may also come from the cookie set at login
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)

class CurrentUser(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str = "user"

def extract_token(request: Request, bearer: Optional[str]) -> Optional[str]:
    if bearer:
        return bearer
    return request.cookies.get(TOKEN_COOKIE)

async def get_current_user(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    db: MongoConnection = Depends(get_db),
) -> CurrentUser:
    """
    Resolve the requester from the bearer header (or the token cookie).
    Any missing, invalid or orphaned token is a 401.
    """
    token = extract_token(request, bearer)
    if not token:
        logger.debug("No token on request")
        raise UnauthorizedError()
    try:
        payload = decode_access_token(token)
    except ValueError:
        logger.warning("Invalid token presented")
        raise UnauthorizedError()

    oid = to_object_id(payload.get("id"))
    if oid is None:
        raise UnauthorizedError()
    user = await db.users_collection.find_one({"_id": oid}, {"password": 0})
    if user is None:
        logger.warning(f"Token refers to unknown user {oid}")
        raise UnauthorizedError()

    return CurrentUser(
        id=str(user["_id"]),
        email=user.get("email"),
        name=user.get("name"),
        role=user.get("role", "user"),
    )
