"""Tests for storage manager."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest  # type: ignore[import-not-found]

from time_manager.core.errors import ConflictError, NotFoundError
from time_manager.core.models import Role, Team, User
from time_manager.core.storage import StorageManager


@pytest.fixture  # type: ignore[misc]
def temp_storage(temp_data_dir: Path) -> StorageManager:
    """Create a storage manager with temporary directory."""
    return StorageManager(temp_data_dir)


def new_user(username: str, role: Role = Role.EMPLOYEE, **kwargs) -> User:  # type: ignore[no-untyped-def]
    return User(
        username=username,
        email=f"{username}@example.com",
        password_hash="hash",
        first_name=username.title(),
        last_name="Test",
        role=role,
        **kwargs,
    )


T0 = datetime(2025, 11, 10, 8, 0, tzinfo=timezone.utc)


class TestStorageInitialization:
    """Test file layout."""

    def test_initialization_creates_csv_files(self, temp_storage: StorageManager) -> None:
        """Initialization creates CSV files with headers."""
        assert temp_storage.users_file.exists()
        assert temp_storage.teams_file.exists()
        assert temp_storage.clocks_file.exists()

        with open(temp_storage.clocks_file) as f:
            header = f.readline().strip()
        assert header == "id,user_id,time,status,created_at"

    def test_backup(self, temp_storage: StorageManager) -> None:
        """Backups copy every data file."""
        backup_path = temp_storage.backup("test")

        assert (backup_path / "users.csv").exists()
        assert (backup_path / "clocks.csv").exists()


class TestUserStorage:
    """Test user persistence."""

    def test_create_assigns_sequential_ids(self, temp_storage: StorageManager) -> None:
        first = temp_storage.create_user(new_user("alice"))
        second = temp_storage.create_user(new_user("bob"))

        assert first.id == 1
        assert second.id == 2
        assert [u.username for u in temp_storage.load_users()] == ["alice", "bob"]

    def test_duplicate_email_rejected(self, temp_storage: StorageManager) -> None:
        temp_storage.create_user(new_user("alice"))
        clash = new_user("alice2")
        clash.email = "ALICE@example.com"

        with pytest.raises(ConflictError, match="Email already used"):
            temp_storage.create_user(clash)

    def test_duplicate_username_rejected(self, temp_storage: StorageManager) -> None:
        temp_storage.create_user(new_user("alice"))
        clash = new_user("alice")
        clash.email = "other@example.com"

        with pytest.raises(ConflictError, match="Username already taken"):
            temp_storage.create_user(clash)

    def test_get_user(self, temp_storage: StorageManager) -> None:
        created = temp_storage.create_user(new_user("alice", role=Role.MANAGER))

        loaded = temp_storage.get_user(created.id)
        assert loaded is not None
        assert loaded.username == "alice"
        assert loaded.role == Role.MANAGER
        assert temp_storage.get_user(999) is None

    def test_find_by_credentials(self, temp_storage: StorageManager) -> None:
        """Users can be found by username or email."""
        temp_storage.create_user(new_user("alice"))

        assert temp_storage.find_user_by_credentials("alice") is not None
        assert temp_storage.find_user_by_credentials("Alice@Example.com") is not None
        assert temp_storage.find_user_by_credentials("nobody") is None

    def test_save_user(self, temp_storage: StorageManager) -> None:
        user = temp_storage.create_user(new_user("alice"))
        user.first_name = "Alicia"
        temp_storage.save_user(user)

        loaded = temp_storage.get_user(user.id)
        assert loaded is not None
        assert loaded.first_name == "Alicia"

    def test_save_unknown_user(self, temp_storage: StorageManager) -> None:
        ghost = new_user("ghost")
        ghost.id = 42

        with pytest.raises(NotFoundError):
            temp_storage.save_user(ghost)

    def test_delete_user_cascades(self, temp_storage: StorageManager) -> None:
        """Deleting a user removes their events and clears managed teams."""
        alice = temp_storage.create_user(new_user("alice", role=Role.MANAGER))
        bob = temp_storage.create_user(new_user("bob"))
        team = temp_storage.create_team(Team(name="Ops", manager_id=alice.id))
        temp_storage.append_clock_event(alice.id, True, T0)
        temp_storage.append_clock_event(bob.id, True, T0)

        assert temp_storage.delete_user(alice.id) is True

        assert temp_storage.get_user(alice.id) is None
        assert temp_storage.query_events(alice.id) == []
        assert len(temp_storage.query_events(bob.id)) == 1
        reloaded = temp_storage.get_team(team.id)
        assert reloaded is not None
        assert reloaded.manager_id is None

    def test_delete_missing_user(self, temp_storage: StorageManager) -> None:
        assert temp_storage.delete_user(7) is False


class TestTeamStorage:
    """Test team persistence."""

    def test_members(self, temp_storage: StorageManager) -> None:
        team = temp_storage.create_team(Team(name="Dev"))
        alice = temp_storage.create_user(new_user("alice"))
        temp_storage.create_user(new_user("bob"))

        assert temp_storage.set_team_members(team.id, [alice.id, 999]) == 1
        assert [u.username for u in temp_storage.team_members(team.id)] == ["alice"]

    def test_delete_team_detaches_members(self, temp_storage: StorageManager) -> None:
        team = temp_storage.create_team(Team(name="Dev"))
        alice = temp_storage.create_user(new_user("alice", team_id=team.id))

        assert temp_storage.delete_team(team.id) is True

        loaded = temp_storage.get_user(alice.id)
        assert loaded is not None
        assert loaded.team_id is None
        assert temp_storage.get_team(team.id) is None

    def test_save_team(self, temp_storage: StorageManager) -> None:
        team = temp_storage.create_team(Team(name="Dev"))
        team.description = "Builders"
        temp_storage.save_team(team)

        loaded = temp_storage.get_team(team.id)
        assert loaded is not None
        assert loaded.description == "Builders"


class TestClockStorage:
    """Test the append-only clock log."""

    def test_append_and_last_event(self, temp_storage: StorageManager) -> None:
        temp_storage.append_clock_event(1, True, T0)
        temp_storage.append_clock_event(1, False, T0 + timedelta(hours=8))
        temp_storage.append_clock_event(2, True, T0 + timedelta(hours=9))

        last = temp_storage.find_last_event(1)
        assert last is not None
        assert last.status is False
        assert last.time == T0 + timedelta(hours=8)

    def test_last_event_uses_time_not_insertion(self, temp_storage: StorageManager) -> None:
        """A back-dated event does not become the latest."""
        temp_storage.append_clock_event(1, True, T0 + timedelta(hours=2))
        temp_storage.append_clock_event(1, False, T0)

        last = temp_storage.find_last_event(1)
        assert last is not None
        assert last.status is True

    def test_no_events(self, temp_storage: StorageManager) -> None:
        assert temp_storage.find_last_event(1) is None
        assert temp_storage.query_events(1) == []

    def test_default_time_is_now(self, temp_storage: StorageManager) -> None:
        before = datetime.now(timezone.utc)
        event = temp_storage.append_clock_event(1, True)
        after = datetime.now(timezone.utc)

        assert before <= event.time <= after

    def test_query_window_inclusive_and_sorted(self, temp_storage: StorageManager) -> None:
        """Both window bounds are inclusive; results ascend by time."""
        temp_storage.append_clock_event(1, False, T0 + timedelta(hours=8))
        temp_storage.append_clock_event(1, True, T0)
        temp_storage.append_clock_event(1, True, T0 + timedelta(days=2))

        events = temp_storage.query_events(1, start=T0, end=T0 + timedelta(hours=8))
        assert [e.time for e in events] == [T0, T0 + timedelta(hours=8)]

        later = temp_storage.query_events(1, start=T0 + timedelta(hours=9))
        assert len(later) == 1

    def test_ids_are_sequential_across_users(self, temp_storage: StorageManager) -> None:
        first = temp_storage.append_clock_event(1, True, T0)
        second = temp_storage.append_clock_event(2, True, T0)

        assert (first.id, second.id) == (1, 2)

    def test_shared_directory_sees_writes(self, temp_data_dir: Path) -> None:
        """Two managers on one directory share the same data."""
        writer = StorageManager(temp_data_dir)
        reader = StorageManager(temp_data_dir)

        writer.append_clock_event(1, True, T0)
        assert len(reader.query_events(1)) == 1
