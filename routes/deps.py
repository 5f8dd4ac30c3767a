from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.errors import AuthenticationError
from core.security import decode_access_token
from models.user import User
from services.user_service import user_service

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """Inloggad användare ur Authorization: Bearer <token>."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authorization header required")
    user_id = decode_access_token(credentials.credentials)
    user = user_service.get_user(user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user


__all__ = ["bearer_scheme", "get_current_user"]
