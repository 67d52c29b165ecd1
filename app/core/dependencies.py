"""
FastAPI dependencies: service lookup, rate limiting and admin authentication
"""
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Callable, Optional

from app.config import Settings
from app.core.exceptions import AuthenticationError
from app.services import CareerService, ContactService, HealthService
from app.utils.security import ADMIN_ROLE, verify_token

# HTTP Bearer token scheme; missing tokens are reported through our envelope
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_contact_service(request: Request) -> ContactService:
    return request.app.state.contact_service


def get_career_service(request: Request) -> CareerService:
    return request.app.state.career_service


def get_health_service(request: Request) -> HealthService:
    return request.app.state.health_service


def client_address(request: Request) -> str:
    """
    Address used as the rate-limit key

    The first X-Forwarded-For hop is only trusted behind a known proxy
    """
    settings = get_settings(request)
    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def rate_limit(name: str) -> Callable:
    """
    Dependency counting the request against one of the app's limiters

    Args:
        name: Key in app.state.rate_limiters ('api', 'contact', 'career')

    Raises:
        RateLimitError: If the client is over its ceiling
    """
    async def dependency(request: Request) -> None:
        limiter = request.app.state.rate_limiters[name]
        limiter.hit(client_address(request))

    return dependency


async def get_current_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """
    Verify the bearer token belongs to the admin

    Returns:
        str: Admin email from the token

    Raises:
        AuthenticationError: If the token is missing, invalid or not an admin token
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = verify_token(credentials.credentials, get_settings(request))
    if payload is None or payload.get("role") != ADMIN_ROLE or not payload.get("sub"):
        raise AuthenticationError()

    return payload["sub"]
