# storefront/utils/text.py
import hashlib
import secrets

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

MAX_INPUT_LENGTH = 255

_email_adapter = TypeAdapter(EmailStr)


def sanitize(value) -> str:
    """Trim free-form input and cap it at MAX_INPUT_LENGTH characters."""
    if value is None:
        return ""
    return str(value).strip()[:MAX_INPUT_LENGTH]


def is_valid_email(email: str) -> bool:
    try:
        _email_adapter.validate_python(email)
    except PydanticValidationError:
        return False
    return True


def hash_password(password: str) -> str:
    # no salt, demo store only
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def generate_token() -> str:
    return secrets.token_urlsafe(18)
