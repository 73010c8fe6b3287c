"""Tests for the access policy."""

import pytest

from time_manager.core.errors import AuthorizationError, ErrorKind
from time_manager.core.models import Role
from time_manager.core.policy import Requester, can_act_on, ensure_can_act_on, require_role


class TestAccessPolicy:
    """Test the self-or-manager rule."""

    def test_employee_on_self(self) -> None:
        assert can_act_on(Requester(id=3, role=Role.EMPLOYEE), 3) is True

    def test_employee_on_other(self) -> None:
        assert can_act_on(Requester(id=3, role=Role.EMPLOYEE), 4) is False

    def test_manager_on_anyone(self) -> None:
        manager = Requester(id=1, role=Role.MANAGER)
        assert can_act_on(manager, 1) is True
        assert can_act_on(manager, 999) is True

    def test_denial_raises_authorization_error(self) -> None:
        """A denial refuses the operation with a 403-kind error."""
        with pytest.raises(AuthorizationError) as exc_info:
            ensure_can_act_on(Requester(id=3, role=Role.EMPLOYEE), 4)

        assert exc_info.value.kind == ErrorKind.AUTHORIZATION
        assert exc_info.value.status_code == 403

    def test_denial_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Refusals are logged as warnings."""
        with caplog.at_level("WARNING", logger="time_manager.core.policy"):
            with pytest.raises(AuthorizationError):
                ensure_can_act_on(Requester(id=3, role=Role.EMPLOYEE), 4)

        assert "denied access to user 4" in caplog.text


class TestRequireRole:
    """Test role gates."""

    def test_manager_passes(self) -> None:
        require_role(Requester(id=1, role=Role.MANAGER), Role.MANAGER)

    def test_employee_refused(self) -> None:
        with pytest.raises(AuthorizationError, match="Insufficient permissions"):
            require_role(Requester(id=2, role=Role.EMPLOYEE), Role.MANAGER)

    def test_no_roles_allows_everyone(self) -> None:
        require_role(Requester(id=2, role=Role.EMPLOYEE))
