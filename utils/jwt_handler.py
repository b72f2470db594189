from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from settings.config import settings
from utils.logger import get_logger

logger = get_logger("JWT_HANDLER")

def create_access_token(user_id: str) -> str:
    """
    Signed token carrying the user id, valid for JWT_EXPIRE_DAYS.
    """
    now = datetime.now(timezone.utc)
    expire = now + timedelta(days=settings.JWT_EXPIRE_DAYS)
    payload = {"id": str(user_id), "iat": now, "exp": expire}
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    logger.info(f"Access token created with expiry {expire.isoformat()}")
    return token

def decode_access_token(token: str) -> dict:
    """
    Decode JWT token and return payload.
    Raises ValueError if invalid or expired.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        raise ValueError("Invalid token")
