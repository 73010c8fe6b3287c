"""Clock endpoints: toggle in/out and clock history."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status  # type: ignore[import-untyped]

from time_manager.api.auth import get_requester
from time_manager.api.dependencies import get_clock_service
from time_manager.api.models import ClockEventResponse, ToggleClockRequest
from time_manager.core.clock import ClockService
from time_manager.core.errors import ValidationError
from time_manager.core.policy import Requester

router = APIRouter()


@router.post("", response_model=ClockEventResponse, status_code=status.HTTP_201_CREATED)
async def toggle_clock(
    request: ToggleClockRequest,
    service: ClockService = Depends(get_clock_service),
    requester: Requester = Depends(get_requester),
) -> ClockEventResponse:
    """Clock a user in, or out if they are currently clocked in.

    Args:
        request: Toggle request carrying the target ``user_id``
        service: Clock service (injected)
        requester: Authenticated identity (injected)

    Returns:
        Newly created clock event

    Example:
        >>> POST /api/clocks
        {"user_id": 3}
        >>> 201
        {"id": 12, "user_id": 3, "status": true, "time": "2025-11-16T08:00:00Z"}
    """
    if request.user_id is None:
        raise ValidationError("user_id required")

    event = service.toggle(requester, request.user_id)
    return ClockEventResponse.from_event(event)


@router.get("/{user_id}", response_model=list[ClockEventResponse])
async def list_user_clocks(
    user_id: int,
    start_date: Optional[str] = Query(None, description="Window start (ISO 8601, inclusive)"),
    end_date: Optional[str] = Query(None, description="Window end (ISO 8601, inclusive)"),
    service: ClockService = Depends(get_clock_service),
    requester: Requester = Depends(get_requester),
) -> list[ClockEventResponse]:
    """List a user's clock events in ascending time order.

    Employees may only list their own events.
    """
    events = service.list_events(requester, user_id, start_date, end_date)
    return [ClockEventResponse.from_event(e) for e in events]
