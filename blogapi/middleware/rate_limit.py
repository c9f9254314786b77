"""Throttling for the credential endpoints (login and registration)

Only routes decorated with ``limiter.limit`` are throttled; no global
default applies. The limits and storage are read from the environment when
this module is imported, so a ``Settings`` passed to ``create_app`` can only
switch the limiter on or off.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from blogapi.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)

RATE_LIMITS = {
    "login": settings.RATE_LIMIT_LOGIN,
    "register": settings.RATE_LIMIT_REGISTER,
}
