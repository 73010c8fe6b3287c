"""Tests for core data models."""

from datetime import datetime, timedelta, timezone

import pytest

from time_manager.core.models import ClockEvent, Role, Team, User, ensure_utc


class TestClockEvent:
    """Test ClockEvent model."""

    def test_event_is_immutable(self) -> None:
        """Clock events cannot be modified once created."""
        event = ClockEvent(id=1, user_id=2, time=datetime(2025, 11, 16, 9, 0), status=True)

        with pytest.raises(AttributeError):
            event.status = False  # type: ignore[misc]

    def test_is_clock_in(self) -> None:
        """True status means clock-in."""
        assert ClockEvent(id=1, user_id=1, time=datetime.now(), status=True).is_clock_in
        assert not ClockEvent(id=2, user_id=1, time=datetime.now(), status=False).is_clock_in

    def test_to_dict_from_dict(self) -> None:
        """Serialization keeps the time in UTC and the status as a bool."""
        event = ClockEvent(
            id=5,
            user_id=3,
            time=datetime(2025, 11, 16, 9, 30, tzinfo=timezone(timedelta(hours=1))),
            status=False,
        )

        data = event.to_dict()
        assert data["time"] == "2025-11-16T08:30:00+00:00"

        # CSV hands everything back as strings
        restored = ClockEvent.from_dict({k: str(v) for k, v in data.items()})
        assert restored.id == 5
        assert restored.user_id == 3
        assert restored.status is False
        assert restored.time == datetime(2025, 11, 16, 8, 30, tzinfo=timezone.utc)


class TestUser:
    """Test User model."""

    def test_user_defaults(self) -> None:
        """New users are employees without a team."""
        user = User(
            username="jdoe",
            email="jdoe@example.com",
            password_hash="x",
            first_name="John",
            last_name="Doe",
        )

        assert user.id == 0
        assert user.role == Role.EMPLOYEE
        assert user.is_manager is False
        assert user.team_id is None
        assert user.phone_number is None

    def test_optional_fields_survive_csv(self) -> None:
        """Empty optional fields come back as None."""
        user = User(
            id=4,
            username="boss",
            email="boss@example.com",
            password_hash="hash",
            first_name="Big",
            last_name="Boss",
            role=Role.MANAGER,
        )

        restored = User.from_dict({k: str(v) for k, v in user.to_dict().items()})
        assert restored.id == 4
        assert restored.role == Role.MANAGER
        assert restored.team_id is None
        assert restored.phone_number is None

    def test_team_id_round_trip(self) -> None:
        """A team reference is restored as an int."""
        user = User(
            id=1,
            username="a",
            email="a@example.com",
            password_hash="h",
            first_name="A",
            last_name="B",
            team_id=9,
        )
        restored = User.from_dict({k: str(v) for k, v in user.to_dict().items()})
        assert restored.team_id == 9


class TestTeam:
    """Test Team model."""

    def test_team_without_manager(self) -> None:
        """Teams may have no manager."""
        team = Team(id=2, name="Ops")
        restored = Team.from_dict({k: str(v) for k, v in team.to_dict().items()})

        assert restored.name == "Ops"
        assert restored.manager_id is None
        assert restored.description is None


class TestEnsureUtc:
    """Test timezone normalisation."""

    def test_naive_becomes_utc(self) -> None:
        assert ensure_utc(datetime(2025, 1, 1, 12, 0)).tzinfo == timezone.utc

    def test_aware_is_converted(self) -> None:
        value = datetime(2025, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert ensure_utc(value) == datetime(2025, 1, 1, 17, 0, tzinfo=timezone.utc)
