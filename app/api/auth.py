"""
Admin authentication endpoint
"""
from fastapi import APIRouter, Depends

from app.config import Settings
from app.core.dependencies import get_settings
from app.core.exceptions import AuthenticationError
from app.schemas import AdminLogin, Token
from app.utils.security import authenticate_admin, create_access_token

router = APIRouter(prefix="/admin", tags=["Admin Auth"])


@router.post("/login", response_model=Token)
async def login(credentials: AdminLogin, settings: Settings = Depends(get_settings)):
    """
    Exchange the admin email and password for a bearer token

    Raises:
        AuthenticationError: If the credentials don't match
    """
    if not authenticate_admin(credentials.email, credentials.password, settings):
        raise AuthenticationError("Invalid email or password")

    return Token(access_token=create_access_token(credentials.email.lower(), settings))
