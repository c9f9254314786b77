"""Normalization helpers shared by storage, lookups and uniqueness checks"""
import re
import uuid

_WHITESPACE = re.compile(r"\s")


def normalize_username(value: str) -> str:
    """Trim, drop every whitespace character and lowercase."""
    return _WHITESPACE.sub("", value.strip()).lower()


def normalize_email(value: str) -> str:
    return value.strip().lower()


def normalize_category(value: str) -> str:
    """Trim, replace each whitespace character with a hyphen and lowercase.

    ``" Tech News "`` -> ``"tech-news"``
    """
    return _WHITESPACE.sub("-", value.strip()).lower()


def is_valid_id(value: str) -> bool:
    """Return True if value is a well-formed record id (UUID string)"""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
