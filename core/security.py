from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from core.config import settings
from core.errors import AuthenticationError


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(user_id: str, expires_in: timedelta | None = None) -> str:
    """Signera en bearer-token med användar-ID som subject."""
    now = datetime.now(timezone.utc)
    lifetime = expires_in if expires_in is not None else timedelta(hours=settings.jwt_expires_hours)
    payload = {"sub": user_id, "iat": now, "exp": now + lifetime}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """Returnera användar-ID ur token, annars AuthenticationError."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token")
    return user_id


__all__ = ["create_access_token", "decode_access_token", "hash_password", "verify_password"]
