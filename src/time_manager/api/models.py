"""Pydantic models for API requests and responses.

Field names follow the wire format of each endpoint, which mixes
snake_case (resources) and camelCase (tokens, reports).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field  # type: ignore[import-untyped]

from time_manager.core.models import ClockEvent, Role, Team, User
from time_manager.core.reports import HoursReport

# ============================================================================
# Response Models
# ============================================================================


class ClockEventResponse(BaseModel):
    """Response model for a clock event."""

    id: int
    user_id: int
    status: bool = Field(..., description="True for clock-in, False for clock-out")
    time: datetime

    @classmethod
    def from_event(cls, event: ClockEvent) -> "ClockEventResponse":
        """Create response from ClockEvent model."""
        return cls(id=event.id, user_id=event.user_id, status=event.status, time=event.time)


class UserResponse(BaseModel):
    """Response model for a user; never includes the password hash."""

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    role: Role
    team_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        """Create response from User model."""
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            phone_number=user.phone_number,
            role=user.role,
            team_id=user.team_id,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class TeamResponse(BaseModel):
    """Response model for a team with its members."""

    id: int
    name: str
    description: Optional[str] = None
    manager_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    members: list[UserResponse] = Field(default_factory=list)

    @classmethod
    def from_team(cls, team: Team, members: list[User]) -> "TeamResponse":
        """Create response from Team model and its members."""
        return cls(
            id=team.id,
            name=team.name,
            description=team.description,
            manager_id=team.manager_id,
            created_at=team.created_at,
            updated_at=team.updated_at,
            members=[UserResponse.from_user(m) for m in members],
        )


class ReportResponse(BaseModel):
    """Response model for a user's hours report."""

    userId: int
    totalHours: float
    averageDailyHours: float
    workDays: int
    startDate: Optional[str] = None
    endDate: Optional[str] = None

    @classmethod
    def from_report(cls, report: HoursReport) -> "ReportResponse":
        """Create response from HoursReport."""
        return cls(**report.to_dict())


class TokenPairResponse(BaseModel):
    """Response model for freshly issued tokens."""

    accessToken: str = Field(..., description="Short-lived JWT access token")
    refreshToken: str = Field(..., description="Long-lived JWT refresh token")


class AuthResponse(TokenPairResponse):
    """Response model for register and login."""

    user: UserResponse


class MessageResponse(BaseModel):
    """Response model for operations without a resource body."""

    message: str


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    service: str = Field(..., description="Service name")
    timestamp: datetime = Field(..., description="Current server time")


class ErrorBody(BaseModel):
    """Status and message of a failed request."""

    status: int
    message: str


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: ErrorBody


# ============================================================================
# Request Models
# ============================================================================


class ToggleClockRequest(BaseModel):
    """Request model for clocking a user in or out."""

    user_id: Optional[int] = Field(None, description="User to clock")


class RegisterRequest(BaseModel):
    """Request model for self-registration.

    Fields are optional here so missing ones can be reported together.
    """

    username: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=254)
    password: Optional[str] = Field(None, max_length=200)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=50)


class LoginRequest(BaseModel):
    """Request model for login by username or email."""

    username: Optional[str] = Field(None, description="Username or email address")
    password: Optional[str] = None


class RefreshRequest(BaseModel):
    """Request model for refreshing tokens."""

    refreshToken: Optional[str] = None


class CreateUserRequest(BaseModel):
    """Request model for a manager creating a user."""

    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=200)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=50)
    role: Role = Role.EMPLOYEE
    team_id: Optional[int] = None


class UpdateUserRequest(BaseModel):
    """Request model for updating a user."""

    username: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, min_length=3, max_length=254)
    password: Optional[str] = Field(None, min_length=1, max_length=200)
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=50)
    role: Optional[Role] = None
    team_id: Optional[int] = None


class CreateTeamRequest(BaseModel):
    """Request model for creating a team."""

    name: Optional[str] = Field(None, max_length=200, description="Team name")
    description: Optional[str] = Field(None, max_length=1000)
    manager_id: Optional[int] = None


class UpdateTeamRequest(BaseModel):
    """Request model for updating a team."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    manager_id: Optional[int] = None


class TeamMembersRequest(BaseModel):
    """Request model for assigning users to a team."""

    userIds: list[int] = Field(default_factory=list)
