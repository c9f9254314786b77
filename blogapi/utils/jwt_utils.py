"""JWT utilities - token signing and verification"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from blogapi.config import Settings


def create_access_token(subject: str, is_admin: bool, settings: Settings) -> str:
    """Sign and return an access token.

    Args:
        subject:  User id, stored as the 'sub' claim.
        is_admin: Stored as the 'isAdmin' claim and used by deps.py to gate
                  admin-only routes.
        settings: Supplies the signing secret, algorithm and lifetime.

    Returns:
        Signed JWT string.
    """
    now = int(datetime.now(timezone.utc).timestamp())

    payload: Dict[str, Any] = {
        "sub": subject,
        "isAdmin": is_admin,
        "iat": now,
        "exp": now + settings.JWT_ACCESS_TOKEN_EXPIRE_SECONDS,
        # Two logins in the same second must still yield distinct tokens
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, settings.JWT_SECRET_ACCESS_TOKEN, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """Verify signature and expiry and return the payload.

    Raises:
        JWTError: on a bad signature, a malformed token or an expired token.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET_ACCESS_TOKEN,
        algorithms=[settings.JWT_ALGORITHM],
    )


def token_expiry(token: str, settings: Settings) -> datetime:
    """Return when a token stops being accepted, without verifying it.

    Falls back to now + the configured lifetime for strings that are not
    readable JWTs. Naive UTC, matching the DateTime columns.
    """
    try:
        exp = jwt.get_unverified_claims(token).get("exp")
    except JWTError:
        exp = None

    if isinstance(exp, (int, float)):
        try:
            return datetime.fromtimestamp(exp, tz=timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            # exp outside what datetime can represent
            pass
    return datetime.utcnow() + timedelta(seconds=settings.JWT_ACCESS_TOKEN_EXPIRE_SECONDS)
