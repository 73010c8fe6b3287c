"""Per-user hours reports."""

from dataclasses import dataclass
from typing import Any, Optional

from time_manager.core.errors import NotFoundError
from time_manager.core.hours import summarize
from time_manager.core.models import parse_bound
from time_manager.core.policy import Requester, ensure_can_act_on
from time_manager.core.storage import StorageManager


@dataclass(frozen=True)
class HoursReport:
    """Worked-hours report for one user."""

    user_id: int
    total_hours: float
    average_daily_hours: float
    work_days: int
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire payload."""
        return {
            "userId": self.user_id,
            "totalHours": self.total_hours,
            "averageDailyHours": self.average_daily_hours,
            "workDays": self.work_days,
            "startDate": self.start_date,
            "endDate": self.end_date,
        }


class ReportService:
    """Build hours reports from stored clock events."""

    def __init__(self, storage: Optional[StorageManager] = None):
        """Initialize report service.

        Args:
            storage: Storage manager instance. Creates default if None.
        """
        self.storage = storage or StorageManager()

    def user_report(
        self,
        requester: Requester,
        user_id: int,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> HoursReport:
        """Aggregate a user's hours over an optional inclusive window.

        Args:
            requester: Identity issuing the request
            user_id: User to report on
            start_date: Window start (ISO-8601), echoed back in the report
            end_date: Window end (ISO-8601), echoed back in the report

        Returns:
            Hours report

        Raises:
            NotFoundError: If the user does not exist
            AuthorizationError: If the requester may not read this user
            ValidationError: If a window bound cannot be parsed
        """
        if self.storage.get_user(user_id) is None:
            raise NotFoundError("User not found")
        ensure_can_act_on(requester, user_id)

        start = parse_bound(start_date, "startDate")
        end = parse_bound(end_date, "endDate")

        events = self.storage.query_events(user_id, start, end)
        summary = summarize(events)

        return HoursReport(
            user_id=user_id,
            total_hours=summary.total_hours,
            average_daily_hours=summary.average_daily_hours,
            work_days=summary.work_days,
            start_date=start_date or None,
            end_date=end_date or None,
        )
