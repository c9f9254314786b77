"""Post and PostLike models"""
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from blogapi.database import Base
from blogapi.models.user import generate_uuid_string


class Post(Base):
    """Post model - a blog entry written by one user.

    ``category`` holds a normalized category name, not a foreign key; the
    routers check it against the categories table on create and update.
    """

    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, default=generate_uuid_string)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    author_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category = Column(String(255), nullable=False, index=True)
    image = Column(String(512), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    author = relationship("User", back_populates="posts")
    likes = relationship(
        "PostLike",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostLike.created_at",
    )


class PostLike(Base):
    """PostLike model - one row per (post, user) like.

    The composite primary key makes a like toggle a single-row insert or
    delete, so toggles by different users never overwrite each other.
    """

    __tablename__ = "post_likes"

    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    post = relationship("Post", back_populates="likes")
    user = relationship("User")
