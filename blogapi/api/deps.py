"""API dependencies for authentication and authorization.

Two tiers:
  - :func:`require_user`  any logged-in user (``Authorization: Bearer <JWT>``)
  - :func:`require_admin` a user whose token carries ``isAdmin: true``

Status codes are deliberately asymmetric: a missing header or a
blacklisted (logged out) token gives 401, while a token that fails
signature or expiry verification gives 403.
"""
from typing import NamedTuple, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from blogapi.config import Settings
from blogapi.database import get_db
from blogapi.middleware.monitoring import record_auth_failure
from blogapi.models.token_blacklist import TokenBlacklist
from blogapi.utils.errors import APIError, InvalidIdError, UnauthorizedError
from blogapi.utils.jwt_utils import decode_access_token
from blogapi.utils.logger import logger
from blogapi.utils.normalize import is_valid_id

_bearer_scheme = HTTPBearer(auto_error=False)


class Identity(NamedTuple):
    """Caller identity decoded from the access token"""
    id: str
    is_admin: bool


def get_settings(request: Request) -> Settings:
    """Settings the running app was created with"""
    return request.app.state.settings


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> str:
    """Return the raw bearer token or fail with 401."""
    if not credentials:
        record_auth_failure("missing")
        raise APIError(401, "Unauthorized", headers={"WWW-Authenticate": "Bearer"})
    return credentials.credentials


def is_blacklisted(db: Session, token: str) -> bool:
    return db.query(TokenBlacklist).filter(TokenBlacklist.token == token).first() is not None


def require_user(
    request: Request,
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """Authenticate the caller.

    - blacklisted token -> 401 "Unauthorized" (checked before verification)
    - bad signature, malformed or expired -> 403 "Token is not valid!"

    The identity is also stored on ``request.state.user``.
    """
    if is_blacklisted(db, token):
        record_auth_failure("blacklisted")
        raise APIError(401, "Unauthorized", headers={"WWW-Authenticate": "Bearer"})

    try:
        payload = decode_access_token(token, settings)
    except JWTError as exc:
        logger.debug(f"JWT decode failed: {exc}")
        record_auth_failure("invalid")
        raise APIError(403, "Token is not valid!")

    subject = payload.get("sub")
    if not subject:
        raise UnauthorizedError("token has no subject")
    if not is_valid_id(subject):
        raise InvalidIdError("id")

    identity = Identity(id=subject, is_admin=bool(payload.get("isAdmin", False)))
    request.state.user = identity
    return identity


def require_admin(identity: Identity = Depends(require_user)) -> Identity:
    """Require an authenticated admin; non-admins get 403 "Unauthorized"."""
    if not identity.is_admin:
        record_auth_failure("not_admin")
        raise APIError(403, "Unauthorized")
    return identity


def ensure_valid_id(value: str) -> str:
    """Reject malformed path ids with 400 "Invalid ID"."""
    if not is_valid_id(value):
        raise APIError(400, "Invalid ID")
    return value
