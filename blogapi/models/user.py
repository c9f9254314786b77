"""User model"""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from blogapi.database import Base


def generate_uuid_string():
    """Generate UUID as string for SQLite compatibility"""
    return str(uuid.uuid4())


class User(Base):
    """User model - a blog account, optionally with admin rights.

    ``username`` and ``email`` are stored normalized (see
    :func:`blogapi.utils.normalize.normalize_username` / ``normalize_email``);
    ``password`` only ever holds a bcrypt hash.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid_string)
    username = Column(String(20), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    firstname = Column(String(32), default="", nullable=False)
    surname = Column(String(32), default="", nullable=False)
    profile_picture = Column(String(512), default="", nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    posts = relationship("Post", back_populates="author")
