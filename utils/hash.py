from passlib.context import CryptContext
from utils.logger import get_logger

logger = get_logger("HASH_UTILS")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72

def _truncate(password: str) -> str:
    raw = str(password).encode("utf-8")[:BCRYPT_MAX_BYTES]
    return raw.decode("utf-8", errors="ignore")

def hash_password(password: str) -> str:
    """Salted bcrypt hash of a plaintext password."""
    logger.debug("Hashing password")
    return pwd_context.hash(_truncate(password))

def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(_truncate(plain_password), hashed_password)
