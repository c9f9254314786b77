"""Pytest configuration and fixtures"""
import os
import tempfile
from typing import Callable, Generator

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("DATABASE_AUTO_CREATE", "false")
os.environ.setdefault("JWT_SECRET_ACCESS_TOKEN", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("METRICS_ENABLED", "false")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="blogapi-uploads-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from blogapi.database import Base, get_db
from blogapi.main import app

engine = app.state.engine
TestingSessionLocal = app.state.session_factory

API = "/api/v1"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test"""
    import blogapi.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override"""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_user_data() -> dict:
    return {
        "username": "testuser",
        "email": "testuser@example.com",
        "password": "password",
    }


@pytest.fixture
def sample_admin_data() -> dict:
    return {
        "username": "root",
        "email": "root@x.com",
        "password": "secret1",
        "isAdmin": True,
    }


@pytest.fixture
def login(client: TestClient) -> Callable[..., dict]:
    """Log in and return Authorization headers"""

    def _login(**credentials) -> dict:
        response = client.post(f"{API}/auth/login", json=credentials)
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['accessToken']}"}

    return _login


@pytest.fixture
def user_headers(client: TestClient, login, sample_user_data: dict) -> dict:
    """Registered regular user's auth headers"""
    response = client.post(f"{API}/auth/register/user", json=sample_user_data)
    assert response.status_code == 201, response.text
    return login(email=sample_user_data["email"], password=sample_user_data["password"])


@pytest.fixture
def admin_headers(client: TestClient, login, sample_admin_data: dict) -> dict:
    """Registered admin's auth headers"""
    response = client.post(f"{API}/auth/register/admin", json=sample_admin_data)
    assert response.status_code == 201, response.text
    return login(email=sample_admin_data["email"], password=sample_admin_data["password"])


@pytest.fixture
def make_user(client: TestClient, login) -> Callable[[str], dict]:
    """Register another regular user by name and return their auth headers"""

    def _make_user(name: str) -> dict:
        response = client.post(
            f"{API}/auth/register/user",
            json={"username": name, "email": f"{name}@example.com", "password": "password"},
        )
        assert response.status_code == 201, response.text
        return login(username=name, password="password")

    return _make_user


@pytest.fixture
def category(client: TestClient, admin_headers: dict) -> str:
    """Create the 'tech-news' category"""
    response = client.post(f"{API}/categories", json={"name": "Tech News"}, headers=admin_headers)
    assert response.status_code == 201, response.text
    return "tech-news"


@pytest.fixture
def create_post(client: TestClient, category: str) -> Callable[..., str]:
    """Create a post as the given user and return its id"""

    def _create_post(headers: dict, title: str = "Hello", content: str = "First post") -> str:
        response = client.post(
            f"{API}/posts",
            data={"title": title, "content": content, "category": category},
            files={"image": ("cover photo.png", PNG_BYTES, "image/png")},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["message"].rsplit(" ", 1)[-1]

    return _create_post
