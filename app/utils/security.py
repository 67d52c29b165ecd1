"""
Admin authentication helpers
- bcrypt password checks against the configured admin hash
- JWT access tokens carrying the admin role
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import Settings, settings as default_settings

ADMIN_ROLE = "admin"

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _truncate(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    encoded = password.encode("utf-8")
    if len(encoded) > 72:
        return encoded[:72].decode("utf-8", errors="ignore")
    return password


def get_password_hash(password: str) -> str:
    """Hash a password for ADMIN_PASSWORD_HASH"""
    return pwd_context.hash(_truncate(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(_truncate(plain_password), hashed_password)


def authenticate_admin(email: str, password: str, settings: Settings = default_settings) -> bool:
    """
    Check login credentials against the configured admin account

    Returns:
        bool: True if both email and password match
    """
    if email.strip().lower() != settings.ADMIN_EMAIL.lower():
        return False
    return verify_password(password, settings.ADMIN_PASSWORD_HASH)


def create_access_token(
    subject: str,
    settings: Settings = default_settings,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token for the admin

    Args:
        subject: Admin email stored in the "sub" claim
        expires_delta: Optional expiration time delta

    Returns:
        str: Encoded JWT token
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = {"sub": subject, "role": ADMIN_ROLE, "exp": expire}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str, settings: Settings = default_settings) -> Optional[dict]:
    """
    Verify and decode a JWT token

    Returns:
        dict: Decoded token payload if valid, None otherwise
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
