"""Category endpoints"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from blogapi.api.deps import Identity, ensure_valid_id, require_admin, require_user
from blogapi.database import get_db
from blogapi.models.category import Category
from blogapi.schemas.auth import MessageResponse
from blogapi.schemas.category import (
    CategoryListResponse,
    CategoryRequest,
    CategoryResponse,
    CategorySingleResponse,
)
from blogapi.utils.errors import APIError, FieldValidationError
from blogapi.utils.logger import logger
from blogapi.utils.normalize import normalize_category

router = APIRouter(prefix="/categories", tags=["categories"])


def _name_taken(db: Session, name: str, exclude_id: str = None) -> bool:
    query = db.query(Category).filter(Category.name == name)
    if exclude_id:
        query = query.filter(Category.id != exclude_id)
    return query.first() is not None


@router.get("", response_model=CategoryListResponse)
def list_categories(
    db: Session = Depends(get_db),
    _: Identity = Depends(require_user),
):
    """List all categories, newest first"""
    categories = db.query(Category).order_by(Category.created_at.desc()).all()
    if not categories:
        raise APIError(404, "No categories found")
    return CategoryListResponse(categories=[CategoryResponse.from_model(c) for c in categories])


@router.get("/{category_id}", response_model=CategorySingleResponse)
def get_category(
    category_id: str,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    """Get a category by ID (Admin only)"""
    ensure_valid_id(category_id)

    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise APIError(404, f"category with ID {category_id} not found")
    return CategorySingleResponse(category=CategoryResponse.from_model(category))


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    """
    Create a category (Admin only)

    The name is stored normalized: trimmed, lowercased, whitespace -> '-'.
    """
    if not data.name or not data.name.strip():
        raise APIError(400, "Please provide a category name")

    name = normalize_category(data.name)
    if _name_taken(db, name):
        raise FieldValidationError({"name": "name already exists"})

    category = Category(name=name)
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info(f"Created category {name}", extra={"user_id": identity.id, "action": "create_category"})
    return MessageResponse(message=f"category created with ID {category.id}")


@router.put(
    "/{category_id}",
    response_model=MessageResponse,
    responses={304: {"description": "Category not modified"}},
)
def update_category(
    category_id: str,
    data: CategoryRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    """Rename a category (Admin only)"""
    ensure_valid_id(category_id)

    if not data.name or not data.name.strip():
        raise APIError(400, "Please provide a category name")

    name = normalize_category(data.name)

    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise APIError(404, f"category with ID {category_id} not found")

    if _name_taken(db, name, exclude_id=category_id):
        raise APIError(400, "category name already exists, choose a different name")

    if category.name == name:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED)

    category.name = name
    db.commit()

    logger.info(f"Updated category {category_id}", extra={"user_id": identity.id, "action": "update_category"})
    return MessageResponse(message=f"category with ID {category_id} was modified")


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    """Delete a category (Admin only). Posts keep their category string."""
    ensure_valid_id(category_id)

    if not db.query(Category).filter(Category.id == category_id).first():
        raise APIError(404, f"category with ID {category_id} not found")

    deleted = db.query(Category).filter(Category.id == category_id).delete()
    if deleted == 0:
        db.rollback()
        raise APIError(417, "Expectation Failed")
    db.commit()

    logger.info(f"Deleted category {category_id}", extra={"user_id": identity.id, "action": "delete_category"})
    return MessageResponse(message=f"category with ID {category_id} was deleted")
