"""Error types and the field-keyed error normalizer.

Every failure a handler does not answer with an explicit status is turned
into ``{"errors": {field: message}}`` with HTTP 400 by the exception
handlers registered in :func:`blogapi.main.create_app`.
"""
import json
import re
from typing import Dict, Optional

from jose import JWTError
from sqlalchemy.exc import IntegrityError


class APIError(Exception):
    """An explicit status chosen by a handler, rendered as ``{"message": ...}``"""

    def __init__(self, status_code: int, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.headers = headers


class FieldValidationError(Exception):
    """One or more fields failed validation or a uniqueness check"""

    def __init__(self, errors: Dict[str, str]):
        super().__init__(", ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


class InvalidIdError(Exception):
    """A value that should be a record id is malformed"""

    def __init__(self, field: str = "id"):
        super().__init__(f"Invalid {field}")
        self.field = field


class UnauthorizedError(Exception):
    """A nested authorization check failed"""


# sqlite: "UNIQUE constraint failed: users.email"
# postgres: 'Key (email)=(x@y.com) already exists.'
_UNIQUE_PATTERNS = (
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),
    re.compile(r"Key \((\w+)\)=\("),
    re.compile(r"Duplicate entry '.*' for key '(?:\w+\.)?(?:ix_\w+?_)?(\w+)'"),
)


def _unique_field(exc: IntegrityError) -> Optional[str]:
    text = str(exc.orig) if exc.orig is not None else str(exc)
    for pattern in _UNIQUE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def _strip_pydantic_prefix(message: str) -> str:
    for prefix in ("Value error, ", "Assertion failed, "):
        if message.startswith(prefix):
            return message[len(prefix):]
    return message


def normalize_error(exc: Exception) -> Dict[str, str]:
    """Map an exception to a ``{field: message}`` dict.

    Returns an empty dict when the exception is not one we know how to describe.
    """
    errors: Dict[str, str] = {}

    if isinstance(exc, FieldValidationError):
        return dict(exc.errors)

    if isinstance(exc, IntegrityError):
        field = _unique_field(exc)
        if field:
            errors[field] = f"{field} already exists"
        else:
            errors["database"] = "Integrity constraint violated"
        return errors

    # pydantic ValidationError and fastapi RequestValidationError
    if hasattr(exc, "errors") and callable(exc.errors):
        for error in exc.errors():
            loc = [str(part) for part in error.get("loc", ()) if not isinstance(part, int)]
            field = loc[-1] if loc else "body"
            errors.setdefault(field, _strip_pydantic_prefix(error.get("msg", "Invalid value")))
        return errors

    if isinstance(exc, InvalidIdError):
        errors[exc.field] = f"Invalid {exc.field}"
        return errors

    if isinstance(exc, JWTError):
        errors["token"] = "Invalid token"
        return errors

    if isinstance(exc, UnauthorizedError):
        errors["token"] = "Unauthorized"
        return errors

    if isinstance(exc, (NameError, AttributeError)):
        errors["referenceError"] = str(exc)
        return errors

    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int) and 500 <= status_code <= 511:
        errors["server"] = "Internal Server Error"
        return errors

    if isinstance(exc, TypeError):
        errors["typeError"] = str(exc)
        return errors

    if isinstance(exc, (SyntaxError, json.JSONDecodeError)):
        errors["syntaxError"] = str(exc)
        return errors

    return errors
