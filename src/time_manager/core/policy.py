"""Access rules for acting on another user's data."""

import logging
from dataclasses import dataclass

from time_manager.core.errors import AuthorizationError
from time_manager.core.models import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Requester:
    """Authenticated identity issuing a request."""

    id: int
    role: Role

    @property
    def is_manager(self) -> bool:
        """Check if the requester holds the manager role."""
        return self.role == Role.MANAGER


def can_act_on(requester: Requester, target_user_id: int) -> bool:
    """Managers may act on anyone; employees only on themselves."""
    if requester.is_manager:
        return True
    return requester.id == target_user_id


def ensure_can_act_on(requester: Requester, target_user_id: int) -> None:
    """Refuse the operation outright when the policy denies it.

    Raises:
        AuthorizationError: If the requester may not act on the target
    """
    if not can_act_on(requester, target_user_id):
        logger.warning(
            "User %s (%s) denied access to user %s",
            requester.id,
            requester.role.value,
            target_user_id,
        )
        raise AuthorizationError("Insufficient permissions")


def require_role(requester: Requester, *roles: Role) -> None:
    """Restrict an operation to the given roles.

    Raises:
        AuthorizationError: If the requester's role is not listed
    """
    if roles and requester.role not in roles:
        logger.warning("User %s (%s) lacks required role", requester.id, requester.role.value)
        raise AuthorizationError("Insufficient permissions")
