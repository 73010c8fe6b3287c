"""Password hashing and validation rules."""

import re

from passlib.context import CryptContext  # type: ignore[import-untyped]

_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def hash_password(password: str) -> str:
    """Hash a plaintext password."""
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored hash."""
    try:
        return bool(_pwd_context.verify(password, password_hash))
    except ValueError:
        # Unrecognised or corrupt hash
        return False


def is_valid_email(email: str) -> bool:
    """Loose syntactic check: something@something.tld."""
    return bool(EMAIL_PATTERN.match(email))


def is_strong_password(password: str) -> bool:
    """At least 8 characters with one uppercase letter and one digit."""
    return (
        len(password) >= 8
        and re.search(r"[A-Z]", password) is not None
        and re.search(r"[0-9]", password) is not None
    )
