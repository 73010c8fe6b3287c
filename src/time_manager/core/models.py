"""Core data models for clock tracking."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from time_manager.core.errors import ValidationError


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_bound(value: Optional[str], name: str) -> Optional[datetime]:
    """Parse an ISO-8601 date or date-time window bound.

    Naive values are taken as UTC and a bare date means midnight UTC.

    Raises:
        ValidationError: If the value is not ISO-8601
    """
    if value is None or value == "":
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {name}: expected ISO-8601 date or date-time")

    return ensure_utc(parsed)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _parse_bool(value: Any) -> bool:
    # CSV round-trips booleans as "True"/"False"
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


class Role(str, Enum):
    """User role."""

    EMPLOYEE = "employee"
    MANAGER = "manager"


@dataclass(frozen=True)
class ClockEvent:
    """A single clock-in or clock-out for one user.

    Attributes:
        id: Sequential identifier assigned by storage
        user_id: Owner of the event
        time: When the event happened (UTC)
        status: True for clock-in, False for clock-out
        created_at: When this record was written
    """

    id: int
    user_id: int
    time: datetime
    status: bool
    created_at: datetime = field(default_factory=utcnow)

    @property
    def is_clock_in(self) -> bool:
        """Check if this event opens a work period."""
        return self.status is True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for CSV serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "time": ensure_utc(self.time).isoformat(),
            "status": self.status,
            "created_at": ensure_utc(self.created_at).isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClockEvent":
        """Create ClockEvent from dictionary (CSV deserialization)."""
        return cls(
            id=int(data["id"]),
            user_id=int(data["user_id"]),
            time=ensure_utc(datetime.fromisoformat(data["time"])),
            status=_parse_bool(data["status"]),
            created_at=ensure_utc(datetime.fromisoformat(data["created_at"])),
        )


@dataclass
class User:
    """Account of an employee or manager.

    Attributes:
        id: Sequential identifier (0 until stored)
        username: Unique login name
        email: Unique email address, also accepted as login
        password_hash: Hashed password, never exposed through the API
        first_name: Given name
        last_name: Family name
        phone_number: Contact number (optional)
        role: Employee or manager
        team_id: Team the user belongs to (optional)
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    username: str
    email: str
    password_hash: str
    first_name: str
    last_name: str
    id: int = 0
    phone_number: Optional[str] = None
    role: Role = Role.EMPLOYEE
    team_id: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_manager(self) -> bool:
        """Check if the user holds the manager role."""
        return self.role == Role.MANAGER

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for CSV serialization."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "password_hash": self.password_hash,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone_number": self.phone_number or "",
            "role": self.role.value,
            "team_id": self.team_id if self.team_id is not None else "",
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        """Create User from dictionary (CSV deserialization)."""
        return cls(
            id=int(data["id"]),
            username=data["username"],
            email=data["email"],
            password_hash=data["password_hash"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            phone_number=data["phone_number"] if data.get("phone_number") else None,
            role=Role(data["role"]),
            team_id=_optional_int(data.get("team_id")),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )


@dataclass
class Team:
    """Group of users, optionally led by a manager.

    Members are not stored on the team; they are the users whose
    ``team_id`` points at it.
    """

    name: str
    id: int = 0
    description: Optional[str] = None
    manager_id: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for CSV serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description or "",
            "manager_id": self.manager_id if self.manager_id is not None else "",
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Team":
        """Create Team from dictionary (CSV deserialization)."""
        return cls(
            id=int(data["id"]),
            name=data["name"],
            description=data["description"] if data.get("description") else None,
            manager_id=_optional_int(data.get("manager_id")),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
