"""Simple JWT authentication helpers."""
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Optional
from uuid import UUID

import jwt
from fastapi import Header

from src.core.config import settings
from src.core.exceptions import UnauthorizedError


def create_access_token(
    user_id: UUID, expires_minutes: Optional[int] = None, **extra_claims: Any
) -> str:
    """Issue a signed bearer token for ``user_id``."""

    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + dt.timedelta(minutes=minutes),
        **extra_claims,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def require_auth(authorization: Optional[str] = Header(default=None)) -> Dict[str, Any]:
    """Validate a bearer token and return decoded claims."""

    if not authorization or not authorization.lower().startswith("bearer "):
        raise UnauthorizedError("No token provided")

    token = authorization.split(" ", 1)[1].strip()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
        )
    except jwt.InvalidTokenError as exc:
        raise UnauthorizedError("Invalid token") from exc

    if "sub" not in payload:
        raise UnauthorizedError("User missing in token")

    try:
        user_uuid = UUID(str(payload["sub"]))
    except ValueError as exc:
        raise UnauthorizedError("Invalid user identifier") from exc

    return {"user_id": user_uuid, "claims": payload}
