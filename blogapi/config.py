"""Application configuration.

Values come from the environment or a ``.env`` file. The running app keeps
the ``Settings`` it was built with on ``app.state.settings``; handlers reach
it through :func:`blogapi.api.deps.get_settings`.
"""
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Blog API settings"""

    # Database
    DATABASE_URL: str = "sqlite:///./blog.db"
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_POOL_TIMEOUT: int = 30
    DATABASE_POOL_RECYCLE: int = 3600
    DATABASE_AUTO_CREATE: bool = True  # create_all() on startup

    # Access tokens
    JWT_SECRET_ACCESS_TOKEN: str = "jwt-secret-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_SECONDS: int = 86400  # 1 day

    # Password hashing
    BCRYPT_ROUNDS: int = 10

    # Uploaded images, served back under UPLOAD_URL_PATH
    UPLOAD_DIR: str = "public/uploads"
    UPLOAD_URL_PATH: str = "/public/uploads"

    # Server
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text
    CORS_ORIGINS: str = "*"

    # Login/registration throttling, read once at import (see middleware/rate_limit.py)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"  # redis://... when running several workers
    RATE_LIMIT_LOGIN: str = "10/minute"
    RATE_LIMIT_REGISTER: str = "20/hour"

    # Prometheus
    METRICS_ENABLED: bool = True
    METRICS_PATH: str = "/metrics"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def uses_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
