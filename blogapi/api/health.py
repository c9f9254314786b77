"""Liveness and readiness checks"""
import time
from datetime import datetime

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blogapi import __version__
from blogapi.database import get_db
from blogapi.models.category import Category
from blogapi.models.post import Post
from blogapi.models.user import User
from blogapi.utils.logger import logger

router = APIRouter(prefix="/health", tags=["health"])

STARTED_AT = time.time()


@router.get("")
def liveness():
    """The process is up; no dependencies are checked"""
    return {
        "status": "healthy",
        "service": "blogapi",
        "version": __version__,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/ready")
def readiness(db: Session = Depends(get_db)):
    """
    The database answers and the blog tables are readable

    Returns 503 while the database is unreachable or the schema is missing.
    """
    try:
        start = time.perf_counter()
        db.execute(text("SELECT 1"))
        latency_ms = round((time.perf_counter() - start) * 1000, 2)

        counts = {
            "users": db.query(func.count(User.id)).scalar(),
            "posts": db.query(func.count(Post.id)).scalar(),
            "categories": db.query(func.count(Category.id)).scalar(),
        }
    except SQLAlchemyError as exc:
        logger.error(f"Readiness check failed: {exc}", extra={"action": "readiness"})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "message": "Database check failed"},
        )

    return {
        "status": "ready",
        "database": {"reachable": True, "latency_ms": latency_ms},
        "counts": counts,
        "uptime_seconds": round(time.time() - STARTED_AT, 2),
    }
