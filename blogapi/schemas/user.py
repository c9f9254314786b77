"""User schemas"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class UserSummary(BaseModel):
    """Public listing entry (no password, names or update time)"""

    id: str
    username: str
    email: str
    profile_picture: str = Field(..., alias="profilePicture")
    is_admin: bool = Field(..., alias="isAdmin")
    created_at: datetime = Field(..., alias="createdAt")

    class Config:
        populate_by_name = True

    @classmethod
    def from_model(cls, user) -> "UserSummary":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            profile_picture=user.profile_picture,
            is_admin=user.is_admin,
            created_at=user.created_at,
        )


class UserDetail(UserSummary):
    firstname: str
    surname: str
    updated_at: datetime = Field(..., alias="updatedAt")

    @classmethod
    def from_model(cls, user) -> "UserDetail":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            firstname=user.firstname,
            surname=user.surname,
            profile_picture=user.profile_picture,
            is_admin=user.is_admin,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserListResponse(BaseModel):
    users: List[UserSummary]


class UserSingleResponse(BaseModel):
    user: UserDetail


class UserCountResponse(BaseModel):
    users_count: int = Field(..., alias="usersCount")

    class Config:
        populate_by_name = True
