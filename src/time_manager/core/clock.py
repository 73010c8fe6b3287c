"""Clock-in/clock-out engine."""

import logging
import threading
from typing import Optional

from time_manager.core.errors import NotFoundError
from time_manager.core.models import ClockEvent, User, parse_bound
from time_manager.core.policy import Requester, ensure_can_act_on
from time_manager.core.storage import StorageManager

logger = logging.getLogger(__name__)


class ClockService:
    """Toggle and list clock events on behalf of a requester."""

    def __init__(self, storage: Optional[StorageManager] = None):
        """Initialize clock service.

        Args:
            storage: Storage manager instance. Creates default if None.
        """
        self.storage = storage or StorageManager()
        self._user_locks: dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _user_lock(self, user_id: int) -> threading.Lock:
        with self._locks_guard:
            return self._user_locks.setdefault(user_id, threading.Lock())

    def forget_user(self, user_id: int) -> None:
        """Drop the toggle lock of a deleted user."""
        with self._locks_guard:
            self._user_locks.pop(user_id, None)

    def _require_user(self, user_id: int) -> User:
        user = self.storage.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def toggle(self, requester: Requester, user_id: int) -> ClockEvent:
        """Clock the user in, or out if their last event was a clock-in.

        Args:
            requester: Identity issuing the request
            user_id: User to clock

        Returns:
            Newly appended event

        Raises:
            NotFoundError: If the user does not exist
            AuthorizationError: If the requester may not clock this user
        """
        self._require_user(user_id)
        ensure_can_act_on(requester, user_id)

        with self._user_lock(user_id):
            last = self.storage.find_last_event(user_id)
            next_status = last is None or last.status is False
            event = self.storage.append_clock_event(user_id, next_status)

        logger.info(
            "User %s clocked %s by %s",
            user_id,
            "in" if event.status else "out",
            requester.id,
        )
        return event

    def list_events(
        self,
        requester: Requester,
        user_id: int,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> list[ClockEvent]:
        """Events of a user within an optional inclusive window, ascending by time.

        Args:
            requester: Identity issuing the request
            user_id: User whose events are listed
            start_date: Window start (ISO-8601)
            end_date: Window end (ISO-8601)

        Raises:
            NotFoundError: If the user does not exist
            AuthorizationError: If the requester may not read this user
            ValidationError: If a window bound cannot be parsed
        """
        self._require_user(user_id)
        ensure_can_act_on(requester, user_id)

        start = parse_bound(start_date, "start_date")
        end = parse_bound(end_date, "end_date")
        return self.storage.query_events(user_id, start, end)
