"""Field validation for records built from request input.

Each validator collects every failing field and raises a single
FieldValidationError, so clients get one message per invalid field.
"""
from typing import Dict, Optional

from email_validator import EmailNotValidError, validate_email

from blogapi.utils.errors import FieldValidationError
from blogapi.utils.normalize import normalize_category, normalize_email, normalize_username

USERNAME_MAX_LENGTH = 20
NAME_MAX_LENGTH = 32
PASSWORD_MIN_LENGTH = 6
TITLE_MAX_LENGTH = 100


def is_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_new_user(username: Optional[str], email: Optional[str], password: Optional[str]) -> Dict[str, str]:
    """Validate and normalize registration input.

    Returns the normalized ``username``, ``email`` and stripped ``password``.
    """
    errors: Dict[str, str] = {}
    values: Dict[str, str] = {}

    formatted_username = normalize_username(username or "")
    if not formatted_username:
        errors["username"] = "username is required"
    elif len(formatted_username) > USERNAME_MAX_LENGTH:
        errors["username"] = f"username field must not exceed {USERNAME_MAX_LENGTH} characters"
    values["username"] = formatted_username

    formatted_email = normalize_email(email or "")
    if not formatted_email:
        errors["email"] = "email address is required"
    elif not is_email(formatted_email):
        errors["email"] = "invalid email address"
    values["email"] = formatted_email

    formatted_password = (password or "").strip()
    if not formatted_password:
        errors["password"] = "password is required"
    elif len(formatted_password) < PASSWORD_MIN_LENGTH:
        errors["password"] = f"enter at least {PASSWORD_MIN_LENGTH} characters"
    values["password"] = formatted_password

    if errors:
        raise FieldValidationError(errors)
    return values


def validate_new_post(
    title: Optional[str],
    content: Optional[str],
    category: Optional[str],
    has_image: bool,
) -> Dict[str, str]:
    """Validate post creation input; the image itself is stored afterwards."""
    errors: Dict[str, str] = {}

    if not title:
        errors["title"] = "Title is required"
    elif len(title) > TITLE_MAX_LENGTH:
        errors["title"] = f"title field must not exceed {TITLE_MAX_LENGTH} characters"
    if not content:
        errors["content"] = "content is required"
    formatted_category = normalize_category(category) if category else ""
    if not formatted_category:
        errors["category"] = "category is required"
    if not has_image:
        errors["image"] = "image is required"

    if errors:
        raise FieldValidationError(errors)
    return {
        "title": title,
        "content": content,
        "category": formatted_category,
    }
