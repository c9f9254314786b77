"""Category model"""
from datetime import datetime

from sqlalchemy import Column, DateTime, String

from blogapi.database import Base
from blogapi.models.user import generate_uuid_string


class Category(Base):
    """Category model - a named tag posts refer to by normalized name"""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=generate_uuid_string)
    name = Column(String(255), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
