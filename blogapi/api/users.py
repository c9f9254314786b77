"""User endpoints"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from blogapi.api.deps import Identity, ensure_valid_id, get_settings, require_user
from blogapi.config import Settings
from blogapi.database import get_db
from blogapi.models.post import Post, PostLike
from blogapi.models.user import User
from blogapi.schemas.auth import MessageResponse
from blogapi.schemas.user import (
    UserCountResponse,
    UserDetail,
    UserListResponse,
    UserSingleResponse,
    UserSummary,
)
from blogapi.utils.auth import hash_password, verify_password
from blogapi.utils.errors import APIError
from blogapi.utils.logger import logger
from blogapi.utils.normalize import normalize_email, normalize_username
from blogapi.utils.uploads import store_image
from blogapi.utils.validation import (
    NAME_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    is_email,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserListResponse)
def list_users(db: Session = Depends(get_db)):
    """List all users, newest first, without private fields"""
    users = db.query(User).order_by(User.created_at.desc()).all()
    if not users:
        raise APIError(404, "No users")
    return UserListResponse(users=[UserSummary.from_model(u) for u in users])


@router.get("/get/count", response_model=UserCountResponse)
def count_users(
    db: Session = Depends(get_db),
    _: Identity = Depends(require_user),
):
    users_count = db.query(func.count(User.id)).scalar()
    if users_count == 0:
        raise APIError(404, "No users found")
    return UserCountResponse(users_count=users_count)


@router.get("/{user_id}", response_model=UserSingleResponse)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_user),
):
    """Get a user by ID (password never included)"""
    ensure_valid_id(user_id)

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise APIError(404, f"user with ID {user_id} not found")
    return UserSingleResponse(user=UserDetail.from_model(user))


@router.put(
    "",
    response_model=MessageResponse,
    responses={304: {"description": "User not modified"}},
)
def update_user(
    request: Request,
    firstname: Optional[str] = Form(None),
    surname: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user),
    settings: Settings = Depends(get_settings),
):
    """
    Update the caller's own account (multipart/form-data)

    Username and email are normalized and must not belong to another user.
    A new password is re-hashed.
    """
    user = db.query(User).filter(User.id == identity.id).first()
    if not user:
        raise APIError(404, "user not found")

    if (firstname and len(firstname) > NAME_MAX_LENGTH) or (surname and len(surname) > NAME_MAX_LENGTH):
        raise APIError(400, f"firstname and surname fields must not exceed {NAME_MAX_LENGTH} characters")

    if username and len(username) > USERNAME_MAX_LENGTH:
        raise APIError(400, f"username field must not exceed {USERNAME_MAX_LENGTH} characters")

    formatted_username = normalize_username(username) if username else None
    if formatted_username and db.query(User).filter(
        User.username == formatted_username,
        User.id != user.id,
    ).first():
        raise APIError(400, "username already exists, choose a different username")

    formatted_email = normalize_email(email) if email else None
    if formatted_email and not is_email(formatted_email):
        raise APIError(400, "Invalid email address")

    if formatted_email and db.query(User).filter(
        User.email == formatted_email,
        User.id != user.id,
    ).first():
        raise APIError(400, "email already exists, choose a different email")

    formatted_password = password.strip() if password else None
    if formatted_password and len(formatted_password) < PASSWORD_MIN_LENGTH:
        raise APIError(400, f"enter at least {PASSWORD_MIN_LENGTH} characters for the password")

    picture_url = store_image(request, profile_picture, "profilePicture", settings)

    changes = {}
    if firstname is not None and firstname != user.firstname:
        changes["firstname"] = firstname
    if surname is not None and surname != user.surname:
        changes["surname"] = surname
    if formatted_username and formatted_username != user.username:
        changes["username"] = formatted_username
    if formatted_email and formatted_email != user.email:
        changes["email"] = formatted_email
    if formatted_password and not verify_password(formatted_password, user.password):
        changes["password"] = hash_password(formatted_password, settings.BCRYPT_ROUNDS)
    if picture_url:
        changes["profile_picture"] = picture_url

    if not changes:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED)

    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()

    logger.info(
        f"Updated user {user.id}: {', '.join(sorted(changes))}",
        extra={"user_id": user.id, "action": "update_user"},
    )
    return MessageResponse(message=f"user with ID {user.id} was modified")


@router.delete("", response_model=MessageResponse)
def delete_user(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user),
):
    """
    Delete the caller's own account

    The user's posts and likes are removed with it.
    """
    user = db.query(User).filter(User.id == identity.id).first()
    if not user:
        raise APIError(404, "user not found")

    own_posts = select(Post.id).where(Post.author_id == user.id)
    db.query(PostLike).filter(
        (PostLike.user_id == user.id) | PostLike.post_id.in_(own_posts)
    ).delete(synchronize_session=False)
    db.query(Post).filter(Post.author_id == user.id).delete(synchronize_session=False)

    deleted = db.query(User).filter(User.id == user.id).delete(synchronize_session=False)
    if deleted == 0:
        db.rollback()
        raise APIError(417, "Expectation Failed")
    db.commit()

    logger.info(f"Deleted user {identity.id}", extra={"user_id": identity.id, "action": "delete_user"})
    return MessageResponse(message=f"user with ID {identity.id} was deleted")
