"""TokenBlacklist model - raw bearer tokens invalidated by logout"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from blogapi.database import Base


class TokenBlacklist(Base):
    """Stores bearer tokens that were logged out.

    A token present here is refused by :func:`blogapi.api.deps.require_user`
    regardless of its signature or expiry. ``expires_at`` mirrors the token's
    own ``exp`` so rows can be pruned once the token would be rejected anyway.
    """

    __tablename__ = "token_blacklist"

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String(2048), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
