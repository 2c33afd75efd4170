"""
Signed hold tokens handed out with a quote.

A token is an HS256 JWT naming the quoted stay and the quote's expiry.
Checkout accepts it only for the same dates and only before it expires;
single use is enforced separately by the unique ``hold_token`` column.
"""

from __future__ import annotations

import secrets
from datetime import date, datetime, timezone
from typing import Optional

from jose import JWTError, jwt

from villa_booking.config import HOLD_TOKEN_SECRET
from villa_booking.core.errors import ValidationError

ALGORITHM = "HS256"


def _secret(secret: Optional[str]) -> str:
    secret = secret or HOLD_TOKEN_SECRET
    if not secret:
        raise ValueError("HOLD_TOKEN_SECRET or AUTH_JWT_SECRET must be set to issue quotes")
    return secret


def issue_hold_token(
    check_in: date, check_out: date, expires_at: datetime, secret: Optional[str] = None
) -> str:
    claims = {
        "jti": secrets.token_hex(16),
        "check_in": check_in.isoformat(),
        "check_out": check_out.isoformat(),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(claims, _secret(secret), algorithm=ALGORITHM)


def verify_hold_token(
    token: Optional[str],
    check_in: date,
    check_out: date,
    now: datetime,
    secret: Optional[str] = None,
) -> None:
    """
    Check that ``token`` was issued for this stay and has not expired.

    Expiry is compared against ``now`` rather than the wall clock.

    Raises:
        ValidationError: missing, tampered, issued for other dates, or expired
    """
    if not token:
        raise ValidationError(
            "A quote is required before checkout", {"reason": "hold_token_missing"}
        )

    try:
        claims = jwt.decode(
            token, _secret(secret), algorithms=[ALGORITHM], options={"verify_exp": False}
        )
    except JWTError as e:
        raise ValidationError("Invalid quote token", {"reason": "hold_token_invalid"}) from e

    if (claims.get("check_in"), claims.get("check_out")) != (
        check_in.isoformat(),
        check_out.isoformat(),
    ):
        raise ValidationError(
            "This quote was issued for different dates",
            {"reason": "hold_token_mismatch"},
        )

    expires_at = datetime.fromtimestamp(int(claims.get("exp", 0)), tz=timezone.utc)
    if now >= expires_at:
        raise ValidationError(
            "This quote has expired, please request a new one",
            {"reason": "hold_token_expired", "expired_at": expires_at.isoformat()},
        )
