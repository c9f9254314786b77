"""Cross-cutting request handling: metrics and throttling"""
from blogapi.middleware.monitoring import (
    MonitoringMiddleware,
    record_auth_failure,
    record_like_toggle,
    record_login,
    record_logout,
    record_post_created,
    record_registration,
)
from blogapi.middleware.rate_limit import RATE_LIMITS, limiter

__all__ = [
    "MonitoringMiddleware",
    "record_auth_failure",
    "record_like_toggle",
    "record_login",
    "record_logout",
    "record_post_created",
    "record_registration",
    "RATE_LIMITS",
    "limiter",
]
