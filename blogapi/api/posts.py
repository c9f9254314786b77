"""Post endpoints"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from blogapi.api.deps import Identity, ensure_valid_id, get_settings, require_user
from blogapi.middleware.monitoring import record_like_toggle, record_post_created
from blogapi.config import Settings
from blogapi.database import get_db
from blogapi.models.category import Category
from blogapi.models.post import Post, PostLike
from blogapi.models.user import User
from blogapi.schemas.auth import MessageResponse
from blogapi.schemas.post import (
    FilteredPostListResponse,
    LikesCountResponse,
    PostCountResponse,
    PostListResponse,
    PostRecord,
    PostRecordResponse,
    PostResponse,
    PostSingleResponse,
)
from blogapi.utils.errors import APIError
from blogapi.utils.logger import logger
from blogapi.utils.normalize import normalize_category
from blogapi.utils.uploads import store_image
from blogapi.utils.validation import TITLE_MAX_LENGTH, validate_new_post

router = APIRouter(prefix="/posts", tags=["posts"])


def _with_projections(query):
    return query.options(
        selectinload(Post.author),
        selectinload(Post.likes).selectinload(PostLike.user),
    )


def _current_user(db: Session, identity: Identity) -> User:
    """Load the caller; a valid token for a deleted account gives 404."""
    user = db.query(User).filter(User.id == identity.id).first()
    if not user:
        raise APIError(404, "user not found")
    return user


def _category_exists(db: Session, name: str) -> bool:
    return db.query(Category).filter(Category.name == name).first() is not None


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

@router.get("", response_model=PostListResponse)
def list_posts(db: Session = Depends(get_db)):
    """List all posts, newest first, with author and likes as usernames"""
    posts = _with_projections(db.query(Post)).order_by(Post.created_at.desc()).all()
    if not posts:
        raise APIError(404, "No posts found")
    return PostListResponse(posts=[PostResponse.from_model(p) for p in posts])


@router.get("/get/categories", response_model=FilteredPostListResponse)
def list_posts_by_category(
    category: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    List posts in a category

    Query parameters:
    - category: category name, normalized the same way as on storage
    """
    formatted_category = normalize_category(category) if category else None

    posts = (
        _with_projections(db.query(Post))
        .filter(Post.category == formatted_category)
        .order_by(Post.created_at.desc())
        .all()
    )
    if not posts:
        raise APIError(404, f"post with category {category} not found")
    return FilteredPostListResponse(filtered_posts=[PostResponse.from_model(p) for p in posts])


@router.get("/get/count", response_model=PostCountResponse)
def count_posts(
    db: Session = Depends(get_db),
    _: Identity = Depends(require_user),
):
    """Total number of posts; zero is reported as 404"""
    posts_count = db.query(func.count(Post.id)).scalar()
    if posts_count == 0:
        raise APIError(404, "No posts found")
    return PostCountResponse(posts_count=posts_count)


@router.get("/get/likes/{post_id}", response_model=LikesCountResponse)
def count_likes(post_id: str, db: Session = Depends(get_db)):
    """Number of users who like a post"""
    ensure_valid_id(post_id)

    if not db.query(Post).filter(Post.id == post_id).first():
        raise APIError(404, "No posts found")

    total_likes = db.query(func.count(PostLike.user_id)).filter(PostLike.post_id == post_id).scalar()
    return LikesCountResponse(total_likes=total_likes)


@router.get("/{post_id}", response_model=PostSingleResponse)
def get_post(
    post_id: str,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_user),
):
    """Get a post by ID"""
    ensure_valid_id(post_id)

    post = _with_projections(db.query(Post)).filter(Post.id == post_id).first()
    if not post:
        raise APIError(404, "No post found")
    return PostSingleResponse(post=PostResponse.from_model(post))


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    request: Request,
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user),
    settings: Settings = Depends(get_settings),
):
    """
    Create a post authored by the caller (multipart/form-data)

    The ``image`` file is required; its public URL is stored on the post.
    """
    user = _current_user(db, identity)

    formatted_category = normalize_category(category) if category else None
    if formatted_category and not _category_exists(db, formatted_category):
        raise APIError(404, "Category not found")

    has_image = image is not None and bool(image.filename)
    values = validate_new_post(title, content, category, has_image)
    image_url = store_image(request, image, "image", settings)

    post = Post(
        title=values["title"],
        content=values["content"],
        category=values["category"],
        image=image_url,
        author_id=user.id,
    )
    db.add(post)
    db.commit()
    db.refresh(post)

    record_post_created()
    logger.info(f"Created post {post.id}", extra={"user_id": user.id, "action": "create_post"})
    return MessageResponse(message=f"post created with {post.id}")


@router.put(
    "/toggle/likes/{post_id}",
    response_model=PostRecordResponse,
)
def toggle_like(
    post_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user),
):
    """Like the post, or remove the caller's like if already present"""
    ensure_valid_id(post_id)
    user = _current_user(db, identity)

    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise APIError(404, "Post not found")

    like = db.query(PostLike).filter(
        PostLike.post_id == post.id,
        PostLike.user_id == user.id,
    ).first()

    if like:
        db.delete(like)
        action = "unlike_post"
    else:
        db.add(PostLike(post_id=post.id, user_id=user.id))
        action = "like_post"

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(post)

    record_like_toggle(like is None)
    logger.info(f"Toggled like on post {post.id}", extra={"user_id": user.id, "action": action})
    return PostRecordResponse(post=PostRecord.from_model(post))


@router.put(
    "/{post_id}",
    response_model=MessageResponse,
    responses={304: {"description": "Post not modified"}},
)
def update_post(
    request: Request,
    post_id: str,
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user),
    settings: Settings = Depends(get_settings),
):
    """
    Update a post (author only, multipart/form-data)

    Only supplied fields change. Posts the caller did not write are reported
    as not found.
    """
    ensure_valid_id(post_id)
    user = _current_user(db, identity)

    post = db.query(Post).filter(Post.id == post_id, Post.author_id == user.id).first()
    if not post:
        raise APIError(404, "You can't update this post")

    if title and len(title) > TITLE_MAX_LENGTH:
        raise APIError(400, f"title field must not exceed {TITLE_MAX_LENGTH} characters")

    formatted_category = normalize_category(category) if category else None
    if formatted_category and not _category_exists(db, formatted_category):
        raise APIError(404, "category name not found")

    image_url = store_image(request, image, "image", settings)

    changes = {}
    if title and title != post.title:
        changes["title"] = title
    if content and content != post.content:
        changes["content"] = content
    if formatted_category and formatted_category != post.category:
        changes["category"] = formatted_category
    if image_url:
        changes["image"] = image_url

    if not changes:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED)

    for field, value in changes.items():
        setattr(post, field, value)
    db.commit()

    logger.info(
        f"Updated post {post_id}: {', '.join(sorted(changes))}",
        extra={"user_id": user.id, "action": "update_post"},
    )
    return MessageResponse(message=f"post with ID {post_id} was updated")


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user),
):
    """Delete a post (author only) together with its likes"""
    ensure_valid_id(post_id)
    user = _current_user(db, identity)

    post = db.query(Post).filter(Post.id == post_id, Post.author_id == user.id).first()
    if not post:
        raise APIError(404, "post not found")

    db.query(PostLike).filter(PostLike.post_id == post.id).delete(synchronize_session=False)
    deleted = db.query(Post).filter(Post.id == post.id).delete(synchronize_session=False)
    if deleted == 0:
        db.rollback()
        raise APIError(417, "Expectation Failed")
    db.commit()

    logger.info(f"Deleted post {post_id}", extra={"user_id": user.id, "action": "delete_post"})
    return MessageResponse(message=f"post with ID {post_id} was deleted")
