"""Tests for error kinds."""

import pytest

from time_manager.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ErrorKind,
    NotFoundError,
    TimeManagerError,
    ValidationError,
)


class TestErrorKinds:
    """Test the mapping from error class to HTTP status."""

    @pytest.mark.parametrize(
        "error_cls, status",
        [
            (ValidationError, 400),
            (AuthenticationError, 401),
            (AuthorizationError, 403),
            (NotFoundError, 404),
            (ConflictError, 409),
        ],
    )
    def test_status_follows_kind(self, error_cls: type[TimeManagerError], status: int) -> None:
        error = error_cls("boom")

        assert error.status_code == status
        assert error.kind.status_code == status
        assert error.message == "boom"
        assert str(error) == "boom"

    def test_status_cannot_be_overridden(self) -> None:
        """The status always comes from the kind."""
        with pytest.raises(TypeError):
            NotFoundError("gone", 410)  # type: ignore[call-arg]

    def test_kinds_are_distinct(self) -> None:
        assert len({kind.status_code for kind in ErrorKind}) == len(ErrorKind)
