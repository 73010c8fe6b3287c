"""Report endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query  # type: ignore[import-untyped]

from time_manager.api.auth import get_requester
from time_manager.api.dependencies import get_report_service
from time_manager.api.models import ReportResponse
from time_manager.core.errors import ValidationError
from time_manager.core.policy import Requester
from time_manager.core.reports import ReportService

router = APIRouter()


@router.get("", response_model=ReportResponse)
async def get_report(
    userId: Optional[int] = Query(None, description="User to report on"),
    startDate: Optional[str] = Query(None, description="Window start (ISO 8601, inclusive)"),
    endDate: Optional[str] = Query(None, description="Window end (ISO 8601, inclusive)"),
    service: ReportService = Depends(get_report_service),
    requester: Requester = Depends(get_requester),
) -> ReportResponse:
    """Get total hours, work days and daily average for a user.

    Example:
        >>> GET /api/reports?userId=3&startDate=2025-11-01&endDate=2025-11-30
        {
            "userId": 3,
            "totalHours": 14.0,
            "averageDailyHours": 7.0,
            "workDays": 2,
            "startDate": "2025-11-01",
            "endDate": "2025-11-30"
        }
    """
    if userId is None:
        raise ValidationError("userId required in query")

    report = service.user_report(requester, userId, startDate, endDate)
    return ReportResponse.from_report(report)
