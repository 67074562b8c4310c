import logging
import secrets
from typing import Optional

from fastapi import Header
from passlib.context import CryptContext

from vote_api import config
from vote_api.errors import Forbidden, InvalidInput, Unauthorized

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# Hash a password
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


# Verify a plain password against a hash
def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError as e:
        logger.error(f"Configured admin password hash is unusable: {e}")
        return False


# Check the single admin credential pair and hand out the static token
def authenticate_admin(username: Optional[str], password: Optional[str]) -> str:
    if not username or not password:
        raise InvalidInput("Username and password are required")

    password_ok = verify_password(password, config.ADMIN_PASSWORD_HASH)
    if username != config.ADMIN_USERNAME or not password_ok:
        logger.warning(f"Failed admin login for username {username!r}")
        raise Unauthorized("Invalid credentials")

    logger.info(f"Admin {username!r} logged in")
    return config.ADMIN_TOKEN


def require_admin(authorization: Optional[str] = Header(default=None)) -> str:
    """
    FastAPI dependency guarding admin routes.

    Expects "Authorization: Bearer <token>". A missing header or token is a 401,
    a token other than the configured static one is a 403.
    """
    if not authorization:
        raise Unauthorized("No authorization header")

    parts = authorization.split(" ")
    token = parts[1] if len(parts) > 1 else ""
    if not token:
        raise Unauthorized("No token provided")

    if not secrets.compare_digest(token.encode("utf-8"), config.ADMIN_TOKEN.encode("utf-8")):
        logger.warning("Rejected admin request with an invalid token")
        raise Forbidden("Invalid or expired token")
    return token
