"""Registration, login and logout endpoints"""
from datetime import datetime

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from blogapi.api.deps import get_bearer_token, get_settings, is_blacklisted
from blogapi.config import Settings
from blogapi.database import get_db
from blogapi.middleware.monitoring import (
    record_auth_failure,
    record_login,
    record_logout,
    record_registration,
)
from blogapi.middleware.rate_limit import RATE_LIMITS, limiter
from blogapi.models.token_blacklist import TokenBlacklist
from blogapi.models.user import User
from blogapi.schemas.auth import LoginRequest, MessageResponse, RegisterRequest, TokenResponse
from blogapi.utils.auth import hash_password, verify_password
from blogapi.utils.errors import APIError, FieldValidationError
from blogapi.utils.jwt_utils import create_access_token, token_expiry
from blogapi.utils.logger import logger
from blogapi.utils.normalize import normalize_email, normalize_username
from blogapi.utils.validation import validate_new_user

router = APIRouter(prefix="/auth", tags=["authentication"])


def _create_user(db: Session, data: RegisterRequest, is_admin: bool, settings: Settings) -> User:
    values = validate_new_user(data.username, data.email, data.password)

    errors = {}
    if db.query(User).filter(User.username == values["username"]).first():
        errors["username"] = "username already exists"
    if db.query(User).filter(User.email == values["email"]).first():
        errors["email"] = "email already exists"
    if errors:
        raise FieldValidationError(errors)

    user = User(
        username=values["username"],
        email=values["email"],
        password=hash_password(values["password"], settings.BCRYPT_ROUNDS),
        is_admin=is_admin,
    )
    db.add(user)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)

    record_registration(is_admin)
    return user


# ---------------------------------------------------------------------------
# POST /auth/register/user
# ---------------------------------------------------------------------------

@router.post("/register/user", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["register"])
def register_user(
    request: Request,
    data: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Register a regular (non-admin) user.

    Username, email and password are required. Validation and uniqueness
    failures are reported per field under ``errors``.
    """
    if not data.username or not data.email or not data.password:
        raise APIError(400, "Please provide username, email and password")

    user = _create_user(db, data, is_admin=False, settings=settings)

    logger.info(f"Registered user {user.id}", extra={"user_id": user.id, "action": "register_user"})
    return MessageResponse(message=f"user registered with ID: {user.id}")


# ---------------------------------------------------------------------------
# POST /auth/register/admin
# ---------------------------------------------------------------------------

@router.post("/register/admin", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["register"])
def register_admin(
    request: Request,
    data: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Register an admin user.

    Requires ``isAdmin: true`` in the body. This endpoint is open to
    unauthenticated callers.
    """
    if not data.username or not data.email or not data.password:
        raise APIError(400, "Please provide username, email, admin status and password")

    if not data.is_admin:
        raise APIError(400, "Please set admin status to true")

    user = _create_user(db, data, is_admin=True, settings=settings)

    logger.warning(
        f"Registered admin {user.id} through the open admin registration endpoint",
        extra={"user_id": user.id, "action": "register_admin"},
    )
    return MessageResponse(message=f"admin registered with ID: {user.id}")


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------

@router.post("/login", response_model=TokenResponse)
@limiter.limit(RATE_LIMITS["login"])
def login(
    request: Request,
    data: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Exchange username or email plus password for a 1-day access token.

    Email wins when both are given. An unknown identity and a wrong password
    produce the same 401 response. The password is compared exactly as sent;
    registration stored it trimmed, so padded input does not match.
    """
    if (not data.username and not data.email) or not data.password:
        raise APIError(400, "Please provide username/email and password")

    if data.email:
        user = db.query(User).filter(User.email == normalize_email(data.email)).first()
    else:
        user = db.query(User).filter(User.username == normalize_username(data.username)).first()

    if not user or not verify_password(data.password, user.password):
        record_auth_failure("credentials")
        logger.info("Login failed", extra={"action": "login_failed"})
        raise APIError(401, "Incorrect credentials")

    token = create_access_token(user.id, user.is_admin, settings)
    record_login(user.is_admin)

    logger.info(f"Issued access token for {user.id}", extra={"user_id": user.id, "action": "login"})
    return TokenResponse(access_token=token)


# ---------------------------------------------------------------------------
# GET /auth/logout
# ---------------------------------------------------------------------------

@router.get("/logout", response_model=MessageResponse)
def logout(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Blacklist the bearer token sent with the request.

    The token is not verified first: any bearer string is blacklisted. A
    token that is already blacklisted gets 401, like on any protected route.
    """
    if is_blacklisted(db, token):
        raise APIError(401, "Unauthorized", headers={"WWW-Authenticate": "Bearer"})

    pruned = prune_blacklist(db)
    db.add(TokenBlacklist(token=token, expires_at=token_expiry(token, settings)))
    db.commit()

    record_logout()
    logger.info("Token blacklisted", extra={"action": "logout"})
    if pruned:
        logger.info(f"Pruned {pruned} expired blacklist entries", extra={"action": "prune_blacklist"})

    return MessageResponse(message="Logout successful")


def prune_blacklist(db: Session) -> int:
    """Delete blacklist rows whose token has expired anyway. Does not commit."""
    return db.query(TokenBlacklist).filter(
        TokenBlacklist.expires_at < datetime.utcnow()
    ).delete(synchronize_session=False)
