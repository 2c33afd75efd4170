"""
Caller identity from the auth provider's bearer token.

Tokens are HS256 JWTs signed with ``AUTH_JWT_SECRET``. ``sub`` is the user
id; the role is read from ``app_metadata.role`` and falls back to a
top-level ``role`` claim.
"""

from __future__ import annotations

from typing import Any, Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from villa_booking.config import (
    ADMIN_ROLE,
    AUTH_JWT_ALGORITHM,
    AUTH_JWT_AUDIENCE,
    AUTH_JWT_SECRET,
)
from villa_booking.core.errors import Unauthorized


class CallerIdentity(BaseModel):
    user_id: str
    role: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def _role_from_claims(claims: dict[str, Any]) -> Optional[str]:
    app_metadata = claims.get("app_metadata") or {}
    if isinstance(app_metadata, dict) and app_metadata.get("role"):
        return str(app_metadata["role"])
    role = claims.get("role")
    return str(role) if role else None


def decode_token(token: str, secret: Optional[str] = None) -> CallerIdentity:
    """
    Verify a bearer token and return the caller.

    Args:
        token: Encoded JWT
        secret: Signing secret, defaults to ``AUTH_JWT_SECRET``

    Raises:
        Unauthorized: no secret configured, bad signature, expired token or
            no ``sub`` claim
    """
    secret = secret or AUTH_JWT_SECRET
    if not secret:
        raise Unauthorized("Authentication is not configured")

    options = {"verify_aud": AUTH_JWT_AUDIENCE is not None}
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[AUTH_JWT_ALGORITHM],
            audience=AUTH_JWT_AUDIENCE,
            options=options,
        )
    except JWTError as e:
        raise Unauthorized("Invalid or expired token") from e

    user_id = claims.get("sub")
    if not user_id:
        raise Unauthorized("Token has no subject")

    return CallerIdentity(
        user_id=str(user_id), role=_role_from_claims(claims), email=claims.get("email")
    )
