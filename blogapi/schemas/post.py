"""Post schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class UsernameRef(BaseModel):
    """A user reference projected down to the username"""

    username: str


class PostResponse(BaseModel):
    """Post with author and likers resolved to usernames"""

    id: str
    title: str
    content: str
    author: Optional[UsernameRef]
    category: str
    image: str
    likes: List[UsernameRef]
    created_at: datetime = Field(..., alias="createdAt")

    class Config:
        populate_by_name = True

    @classmethod
    def from_model(cls, post) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author=UsernameRef(username=post.author.username) if post.author else None,
            category=post.category,
            image=post.image,
            likes=[UsernameRef(username=like.user.username) for like in post.likes],
            created_at=post.created_at,
        )


class PostRecord(BaseModel):
    """Stored post with raw ids, returned after a like toggle"""

    id: str
    title: str
    content: str
    author: str
    category: str
    image: str
    likes: List[str]
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    class Config:
        populate_by_name = True

    @classmethod
    def from_model(cls, post) -> "PostRecord":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author=post.author_id,
            category=post.category,
            image=post.image,
            likes=[like.user_id for like in post.likes],
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostListResponse(BaseModel):
    posts: List[PostResponse]


class FilteredPostListResponse(BaseModel):
    filtered_posts: List[PostResponse] = Field(..., alias="filteredPosts")

    class Config:
        populate_by_name = True


class PostSingleResponse(BaseModel):
    post: PostResponse


class PostRecordResponse(BaseModel):
    post: PostRecord


class PostCountResponse(BaseModel):
    posts_count: int = Field(..., alias="postsCount")

    class Config:
        populate_by_name = True


class LikesCountResponse(BaseModel):
    total_likes: int = Field(..., alias="totalLikes")

    class Config:
        populate_by_name = True
