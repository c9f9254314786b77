"""Tests for category endpoints"""
import uuid

from fastapi.testclient import TestClient

from blogapi.models.category import Category

API = "/api/v1"


def test_admin_scenario(client: TestClient, db, sample_admin_data: dict):
    """Register admin, log in, list (empty) and create a category"""
    response = client.post(f"{API}/auth/register/admin", json=sample_admin_data)
    assert response.status_code == 201

    response = client.post(f"{API}/auth/login", json={"email": "root@x.com", "password": "secret1"})
    assert response.status_code == 200
    headers = {"Authorization": f"Bearer {response.json()['accessToken']}"}

    assert client.get(f"{API}/categories", headers=headers).status_code == 404

    response = client.post(f"{API}/categories", json={"name": "Tech News"}, headers=headers)
    assert response.status_code == 201
    assert db.query(Category).one().name == "tech-news"

    response = client.get(f"{API}/categories", headers=headers)
    assert response.status_code == 200
    assert [c["name"] for c in response.json()["categories"]] == ["tech-news"]


def test_list_categories_requires_auth(client: TestClient):
    response = client.get(f"{API}/categories")
    assert response.status_code == 401


def test_list_categories_newest_first(client: TestClient, admin_headers: dict, user_headers: dict):
    for name in ("first", "second", "third"):
        client.post(f"{API}/categories", json={"name": name}, headers=admin_headers)

    response = client.get(f"{API}/categories", headers=user_headers)
    assert response.status_code == 200
    assert [c["name"] for c in response.json()["categories"]] == ["third", "second", "first"]


def test_create_category_requires_admin(client: TestClient, user_headers: dict):
    response = client.post(f"{API}/categories", json={"name": "Tech"}, headers=user_headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Unauthorized"


def test_create_category_with_invalid_token(client: TestClient):
    response = client.post(
        f"{API}/categories",
        json={"name": "Tech"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 403
    assert response.json()["message"] == "Token is not valid!"


def test_create_category_requires_name(client: TestClient, admin_headers: dict):
    response = client.post(f"{API}/categories", json={}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Please provide a category name"


def test_create_duplicate_category(client: TestClient, admin_headers: dict, category: str):
    response = client.post(f"{API}/categories", json={"name": " TECH news"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["errors"] == {"name": "name already exists"}


def test_get_category(client: TestClient, db, admin_headers: dict, category: str):
    category_id = db.query(Category).one().id

    response = client.get(f"{API}/categories/{category_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["category"]["name"] == "tech-news"


def test_get_category_invalid_id(client: TestClient, admin_headers: dict):
    response = client.get(f"{API}/categories/1", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid ID"


def test_get_category_not_found(client: TestClient, admin_headers: dict):
    response = client.get(f"{API}/categories/{uuid.uuid4()}", headers=admin_headers)
    assert response.status_code == 404


def test_update_category(client: TestClient, db, admin_headers: dict, category: str):
    category_id = db.query(Category).one().id

    response = client.put(f"{API}/categories/{category_id}", json={"name": "World News"}, headers=admin_headers)
    assert response.status_code == 200

    db.expire_all()
    assert db.query(Category).one().name == "world-news"


def test_update_category_unchanged(client: TestClient, db, admin_headers: dict, category: str):
    category_id = db.query(Category).one().id

    response = client.put(f"{API}/categories/{category_id}", json={"name": "tech news"}, headers=admin_headers)
    assert response.status_code == 304


def test_update_category_to_existing_name(client: TestClient, db, admin_headers: dict, category: str):
    client.post(f"{API}/categories", json={"name": "Sports"}, headers=admin_headers)
    sports_id = db.query(Category).filter(Category.name == "sports").one().id

    response = client.put(f"{API}/categories/{sports_id}", json={"name": "Tech News"}, headers=admin_headers)
    assert response.status_code == 400


def test_update_category_not_found(client: TestClient, admin_headers: dict):
    response = client.put(f"{API}/categories/{uuid.uuid4()}", json={"name": "x"}, headers=admin_headers)
    assert response.status_code == 404


def test_delete_category(client: TestClient, db, admin_headers: dict, category: str):
    category_id = db.query(Category).one().id

    response = client.delete(f"{API}/categories/{category_id}", headers=admin_headers)
    assert response.status_code == 200
    assert db.query(Category).count() == 0

    response = client.delete(f"{API}/categories/{category_id}", headers=admin_headers)
    assert response.status_code == 404
