"""Tests for error normalization and the helpers behind request handling"""
import json

import pytest
from fastapi.testclient import TestClient
from jose import JWTError
from pydantic import BaseModel, ValidationError, field_validator
from sqlalchemy.exc import IntegrityError

from blogapi.utils.errors import (
    APIError,
    FieldValidationError,
    InvalidIdError,
    UnauthorizedError,
    normalize_error,
)
from blogapi.utils.normalize import is_valid_id, normalize_category, normalize_username
from blogapi.utils.uploads import build_filename
from blogapi.utils.validation import validate_new_post

API = "/api/v1"


class _Sample(BaseModel):
    title: str

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        if not value.strip():
            raise ValueError("Title is required")
        return value


def test_field_validation_error():
    exc = FieldValidationError({"title": "Title is required", "image": "image is required"})
    assert normalize_error(exc) == {"title": "Title is required", "image": "image is required"}


@pytest.mark.parametrize(
    "orig, expected",
    [
        ("UNIQUE constraint failed: users.email", {"email": "email already exists"}),
        ('duplicate key value violates unique constraint "users_username_key"\n'
         "DETAIL:  Key (username)=(jane) already exists.", {"username": "username already exists"}),
        ("NOT NULL constraint failed: posts.title", {"database": "Integrity constraint violated"}),
    ],
)
def test_integrity_error(orig, expected):
    exc = IntegrityError("INSERT ...", {}, Exception(orig))
    assert normalize_error(exc) == expected


def test_pydantic_validation_error():
    with pytest.raises(ValidationError) as info:
        _Sample(title="   ")
    assert normalize_error(info.value) == {"title": "Title is required"}


def test_invalid_id_error():
    assert normalize_error(InvalidIdError("post")) == {"post": "Invalid post"}
    assert normalize_error(InvalidIdError()) == {"id": "Invalid id"}


def test_token_errors():
    assert normalize_error(JWTError("bad signature")) == {"token": "Invalid token"}
    assert normalize_error(UnauthorizedError()) == {"token": "Unauthorized"}


def test_runtime_errors():
    assert normalize_error(NameError("name 'x' is not defined")) == {
        "referenceError": "name 'x' is not defined"
    }
    assert "referenceError" in normalize_error(AttributeError("no attribute"))
    assert normalize_error(TypeError("bad operand")) == {"typeError": "bad operand"}
    assert "syntaxError" in normalize_error(json.JSONDecodeError("Expecting value", "", 0))


def test_server_error_status():
    assert normalize_error(APIError(503, "down")) == {"server": "Internal Server Error"}
    assert normalize_error(APIError(404, "missing")) == {}


def test_unknown_error():
    assert normalize_error(RuntimeError("boom")) == {}


def test_malformed_json_body(client: TestClient):
    response = client.post(
        f"{API}/auth/login",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "errors" in response.json()


def test_normalize_helpers():
    assert normalize_username("  Jane Doe\t") == "janedoe"
    assert normalize_category(" Tech  News ") == "tech--news"
    assert is_valid_id("6f1c8a7e-2b1d-4c3e-9a5f-0d2e4b6a8c10")
    assert not is_valid_id("6f1c8a7e")


def test_build_filename():
    filename = build_filename("holiday photo.png", "image/png")
    stem, rest = filename.rsplit("-", 1)
    assert stem == "holiday-photo.png"
    assert rest.endswith(".png")
    assert rest[: -len(".png")].isdigit()


def test_validate_new_post_normalizes_category():
    values = validate_new_post("Hello", "World", " Tech News", True)
    assert values == {"title": "Hello", "content": "World", "category": "tech-news"}


def test_validate_new_post_requires_category():
    with pytest.raises(FieldValidationError) as info:
        validate_new_post("Hello", "World", "   ", True)
    assert info.value.errors == {"category": "category is required"}


def test_long_passwords_hash_and_verify():
    from blogapi.utils.auth import hash_password, verify_password

    password = "p" * 100
    hashed = hash_password(password, rounds=4)
    assert verify_password(password, hashed)
    assert not verify_password("p" * 6, hashed)
