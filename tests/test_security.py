"""Tests for password hashing and input rules."""

from time_manager.core.security import (
    hash_password,
    is_strong_password,
    is_valid_email,
    verify_password,
)


class TestPasswords:
    """Test hashing and verification."""

    def test_hash_is_not_plaintext(self) -> None:
        hashed = hash_password("Secret123")

        assert hashed != "Secret123"
        assert hashed.startswith("$pbkdf2-sha256$")

    def test_verify(self) -> None:
        hashed = hash_password("Secret123")

        assert verify_password("Secret123", hashed) is True
        assert verify_password("secret123", hashed) is False

    def test_corrupt_hash_does_not_verify(self) -> None:
        assert verify_password("Secret123", "not-a-hash") is False

    def test_strength_rules(self) -> None:
        assert is_strong_password("Secret123") is True
        assert is_strong_password("Sh0rt") is False
        assert is_strong_password("nouppercase1") is False
        assert is_strong_password("NoDigitsHere") is False


class TestEmail:
    """Test email syntax check."""

    def test_valid(self) -> None:
        assert is_valid_email("jane.doe@example.com")

    def test_invalid(self) -> None:
        assert not is_valid_email("jane.doe")
        assert not is_valid_email("jane@localhost")
        assert not is_valid_email("jane doe@example.com")
