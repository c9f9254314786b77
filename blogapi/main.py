"""FastAPI application entry point"""
import json
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from jose import JWTError
from pydantic import ValidationError
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError

from blogapi import __version__
from blogapi.api import auth, categories, health, posts, users
from blogapi.config import Settings, settings as default_settings
from blogapi.database import create_database_engine, create_session_factory, init_database
from blogapi.middleware.rate_limit import limiter
from blogapi.utils.errors import (
    APIError,
    FieldValidationError,
    InvalidIdError,
    UnauthorizedError,
    normalize_error,
)
from blogapi.utils.logger import logger, setup_logging

# Failures reported as 400 {"errors": {field: message}}
NORMALIZED_ERRORS = (
    FieldValidationError,
    IntegrityError,
    ValidationError,
    RequestValidationError,
    InvalidIdError,
    JWTError,
    UnauthorizedError,
    NameError,
    AttributeError,
    TypeError,
    SyntaxError,
    json.JSONDecodeError,
)


def _register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        """Explicit statuses chosen by a handler"""
        if exc.status_code >= 500:
            content = {"errors": normalize_error(exc)}
        else:
            content = {"message": exc.message}
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    async def normalized_error_handler(request: Request, exc: Exception):
        """Validation, data-layer and runtime errors caught at the handler boundary"""
        errors = normalize_error(exc)
        logger.info(
            f"Request rejected: {type(exc).__name__}",
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(status_code=400, content={"errors": errors})

    for exc_class in NORMALIZED_ERRORS:
        app.add_exception_handler(exc_class, normalized_error_handler)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        """Handle rate limit exceeded errors"""
        logger.warning(
            "Rate limit exceeded",
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(
            status_code=429,
            content={"message": "Too many requests. Please try again later."},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for uncaught errors"""
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={"path": request.url.path, "method": request.method},
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application for the given settings.

    Settings, the engine and the session factory live on ``app.state`` and are
    handed to handlers through dependencies (see ``blogapi.api.deps``).
    """
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    engine = create_database_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler"""
        logger.info("blogapi starting up", extra={"action": "startup"})
        if settings.DATABASE_AUTO_CREATE:
            init_database(engine)
        yield
        engine.dispose()
        logger.info("blogapi shutting down", extra={"action": "shutdown"})

    app = FastAPI(
        title="Blog API",
        description="Blogging platform backend: users, posts, categories and likes",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # ===== Middleware Setup =====

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.METRICS_ENABLED:
        from prometheus_fastapi_instrumentator import Instrumentator
        from blogapi.middleware.monitoring import MonitoringMiddleware

        app.add_middleware(MonitoringMiddleware)

        instrumentator = Instrumentator(
            should_group_status_codes=True,
            should_ignore_untemplated=True,
            excluded_handlers=["/metrics", "/health", "/health/ready"],
        )
        instrumentator.instrument(app)
        instrumentator.expose(app, endpoint=settings.METRICS_PATH, include_in_schema=False)

    limiter.enabled = settings.RATE_LIMIT_ENABLED
    app.state.limiter = limiter

    _register_exception_handlers(app)

    # ===== Route Setup =====

    api = APIRouter(prefix=settings.API_PREFIX)
    api.include_router(auth.router)
    api.include_router(categories.router)
    api.include_router(posts.router)
    api.include_router(users.router)

    app.include_router(health.router)
    app.include_router(api)

    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    app.mount(settings.UPLOAD_URL_PATH, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "service": "blogapi",
            "version": __version__,
            "status": "operational",
            "api": settings.API_PREFIX,
            "docs": "/docs",
            "health": "/health",
            "metrics": settings.METRICS_PATH if settings.METRICS_ENABLED else None,
        }

    return app


app = create_app()


def run() -> None:
    """Serve the default app with uvicorn"""
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
