"""API dependencies for authentication and common operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from minedine.core.exceptions import AuthenticationError, AuthorizationError
from minedine.core.security import verify_token
from minedine.database import get_db
from minedine.gateways.base import PaymentGateway
from minedine.models.user import User
from minedine.services.gateway_service import gateway_service

# Missing credentials are reported as 401 by get_current_user
security = HTTPBearer(auto_error=False)

__all__ = [
    "get_current_moderator",
    "get_current_user",
    "get_db",
    "get_payment_gateway",
]


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    if not credentials:
        raise AuthenticationError("Not authenticated")

    payload = verify_token(credentials.credentials, token_type="access")
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise AuthenticationError("Invalid token payload")

    result = await db.execute(select(User).where(User.id == user_uuid))
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is deactivated")

    return user


async def get_current_moderator(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get current user and verify they are a moderator or admin."""
    if not current_user.is_moderator:
        raise AuthorizationError("Moderator access required")
    return current_user


def get_payment_gateway() -> PaymentGateway:
    """Payment gateway used for intents and webhook verification."""
    return gateway_service.get_gateway()
