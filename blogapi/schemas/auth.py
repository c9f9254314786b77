"""Authentication schemas"""
from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Registration input; presence is checked by the handler, format by validation.py"""

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    is_admin: Optional[bool] = Field(None, alias="isAdmin")

    class Config:
        populate_by_name = True


class LoginRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str = Field(..., alias="accessToken")

    class Config:
        populate_by_name = True


class MessageResponse(BaseModel):
    message: str
