"""Request metrics, request ids and blog activity counters"""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

from blogapi.utils.logger import logger

SLOW_REQUEST_SECONDS = 1.0

# ===== HTTP =====

http_requests_total = Counter(
    "blogapi_http_requests_total",
    "HTTP requests by route template and status",
    ["method", "route", "status"],
)

http_request_duration_seconds = Histogram(
    "blogapi_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "route"],
)

# ===== Accounts =====

registrations_total = Counter(
    "blogapi_registrations_total",
    "Accounts created",
    ["role"],  # user, admin
)

logins_total = Counter(
    "blogapi_logins_total",
    "Successful logins",
    ["role"],
)

authentication_failures_total = Counter(
    "blogapi_authentication_failures_total",
    "Rejected credentials or tokens",
    ["reason"],  # missing, blacklisted, invalid, not_admin, credentials
)

logouts_total = Counter(
    "blogapi_logouts_total",
    "Tokens revoked through logout",
)

# ===== Content =====

posts_created_total = Counter(
    "blogapi_posts_created_total",
    "Posts created",
)

likes_toggled_total = Counter(
    "blogapi_likes_toggled_total",
    "Like toggles",
    ["action"],  # like, unlike
)


def _route_label(request: Request) -> str:
    """Route template (``/api/v1/posts/{post_id}``) so ids do not explode label sets"""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class MonitoringMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and records its status and latency"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            http_requests_total.labels(
                method=request.method, route=_route_label(request), status=500
            ).inc()
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                extra={"request_id": request_id, "method": request.method, "path": request.url.path},
                exc_info=True,
            )
            raise

        duration = time.perf_counter() - start
        route = _route_label(request)
        http_requests_total.labels(method=request.method, route=route, status=response.status_code).inc()
        http_request_duration_seconds.labels(method=request.method, route=route).observe(duration)

        if duration > SLOW_REQUEST_SECONDS:
            logger.warning(
                f"Slow request: {request.method} {request.url.path}",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round(duration * 1000, 1),
                },
            )

        response.headers["X-Request-ID"] = request_id
        return response


def record_registration(is_admin: bool):
    registrations_total.labels(role="admin" if is_admin else "user").inc()


def record_login(is_admin: bool):
    logins_total.labels(role="admin" if is_admin else "user").inc()


def record_auth_failure(reason: str):
    authentication_failures_total.labels(reason=reason).inc()


def record_logout():
    logouts_total.inc()


def record_post_created():
    posts_created_total.inc()


def record_like_toggle(liked: bool):
    likes_toggled_total.labels(action="like" if liked else "unlike").inc()
