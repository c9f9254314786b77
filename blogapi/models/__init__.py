"""Database models"""
from blogapi.models.category import Category
from blogapi.models.post import Post, PostLike
from blogapi.models.token_blacklist import TokenBlacklist
from blogapi.models.user import User

__all__ = ["Category", "Post", "PostLike", "TokenBlacklist", "User"]
