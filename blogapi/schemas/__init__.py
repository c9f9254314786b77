"""Pydantic schemas for request/response validation"""
from blogapi.schemas.auth import LoginRequest, MessageResponse, RegisterRequest, TokenResponse
from blogapi.schemas.category import (
    CategoryListResponse,
    CategoryRequest,
    CategoryResponse,
    CategorySingleResponse,
)
from blogapi.schemas.post import (
    FilteredPostListResponse,
    LikesCountResponse,
    PostCountResponse,
    PostListResponse,
    PostRecordResponse,
    PostResponse,
    PostSingleResponse,
)
from blogapi.schemas.user import (
    UserCountResponse,
    UserDetail,
    UserListResponse,
    UserSingleResponse,
    UserSummary,
)

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "TokenResponse",
    "MessageResponse",
    "CategoryRequest",
    "CategoryResponse",
    "CategoryListResponse",
    "CategorySingleResponse",
    "PostResponse",
    "PostListResponse",
    "FilteredPostListResponse",
    "PostSingleResponse",
    "PostRecordResponse",
    "PostCountResponse",
    "LikesCountResponse",
    "UserSummary",
    "UserDetail",
    "UserListResponse",
    "UserSingleResponse",
    "UserCountResponse",
]
