"""CSV storage for users, teams and the append-only clock log."""

import csv
import logging
import os
import shutil
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from time_manager.core.errors import ConflictError, NotFoundError
from time_manager.core.models import ClockEvent, Team, User, ensure_utc, utcnow

logger = logging.getLogger(__name__)

USER_FIELDS = [
    "id",
    "username",
    "email",
    "password_hash",
    "first_name",
    "last_name",
    "phone_number",
    "role",
    "team_id",
    "created_at",
    "updated_at",
]
TEAM_FIELDS = ["id", "name", "description", "manager_id", "created_at", "updated_at"]
CLOCK_FIELDS = ["id", "user_id", "time", "status", "created_at"]

# One lock per data directory, shared by every StorageManager pointing at it
_directory_locks: dict[Path, threading.RLock] = {}
_registry_lock = threading.Lock()


def _lock_for(data_dir: Path) -> threading.RLock:
    key = data_dir.resolve()
    with _registry_lock:
        if key not in _directory_locks:
            _directory_locks[key] = threading.RLock()
        return _directory_locks[key]


def _lock_file(file_obj: Any, exclusive: bool = True) -> None:
    """Lock a file in a cross-platform way.

    Args:
        file_obj: File object to lock
        exclusive: If True, acquire exclusive lock; if False, acquire shared lock
    """
    if sys.platform == "win32":
        import msvcrt  # type: ignore[import-not-found]

        mode = msvcrt.LK_NBLCK if exclusive else msvcrt.LK_NBRLCK
        msvcrt.locking(file_obj.fileno(), mode, 1)
    else:
        import fcntl  # type: ignore[import-not-found]

        mode = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(file_obj.fileno(), mode)


def _unlock_file(file_obj: Any) -> None:
    """Unlock a file in a cross-platform way."""
    if sys.platform == "win32":
        import msvcrt  # type: ignore[import-not-found]

        msvcrt.locking(file_obj.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        import fcntl  # type: ignore[import-not-found]

        fcntl.flock(file_obj.fileno(), fcntl.LOCK_UN)


class StorageManager:
    """Manages CSV storage for accounts, teams and clock events.

    Users and teams are rewritten atomically on every change. Clock events
    are only ever appended; they disappear solely when their user is deleted.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """Initialize storage manager.

        Args:
            data_dir: Custom data directory. Defaults to ~/.time-manager/data
        """
        if data_dir is None:
            data_dir = Path.home() / ".time-manager" / "data"

        self.data_dir = data_dir
        self.users_file = self.data_dir / "users.csv"
        self.teams_file = self.data_dir / "teams.csv"
        self.clocks_file = self.data_dir / "clocks.csv"
        self.backup_dir = self.data_dir.parent / "backups"

        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._lock = _lock_for(self.data_dir)

        self._initialize_files()

    def _initialize_files(self) -> None:
        """Create CSV files with headers if they don't exist."""
        with self._lock:
            for file_path, fieldnames in (
                (self.users_file, USER_FIELDS),
                (self.teams_file, TEAM_FIELDS),
                (self.clocks_file, CLOCK_FIELDS),
            ):
                if not file_path.exists():
                    self._write_csv_atomic(file_path, fieldnames, [])

    def _write_csv_atomic(
        self, file_path: Path, fieldnames: list[str], rows: list[dict[str, Any]]
    ) -> None:
        """Write CSV file atomically using temporary file and rename."""
        temp_file = file_path.with_suffix(".tmp")

        try:
            with open(temp_file, "w", newline="", encoding="utf-8") as f:
                _lock_file(f, exclusive=True)

                writer = csv.DictWriter(f, fieldnames=fieldnames)
                writer.writeheader()
                writer.writerows(rows)

                f.flush()
                os.fsync(f.fileno())

                _unlock_file(f)

            temp_file.replace(file_path)

        except Exception:
            if temp_file.exists():
                temp_file.unlink()
            raise

    def _append_csv_row(self, file_path: Path, fieldnames: list[str], row: dict[str, Any]) -> None:
        """Append a single row under an exclusive lock."""
        with open(file_path, "a", newline="", encoding="utf-8") as f:
            _lock_file(f, exclusive=True)
            try:
                csv.DictWriter(f, fieldnames=fieldnames).writerow(row)
                f.flush()
                os.fsync(f.fileno())
            finally:
                _unlock_file(f)

    def _read_csv(self, file_path: Path) -> list[dict[str, Any]]:
        """Read CSV file with a shared lock."""
        if not file_path.exists():
            return []

        with open(file_path, encoding="utf-8", newline="") as f:
            _lock_file(f, exclusive=False)
            try:
                rows = list(csv.DictReader(f))
            finally:
                _unlock_file(f)

        return rows

    @staticmethod
    def _next_id(rows: list[dict[str, Any]]) -> int:
        return max((int(r["id"]) for r in rows), default=0) + 1

    def backup(self, label: Optional[str] = None) -> Path:
        """Copy all data files into a labelled backup directory.

        Args:
            label: Optional label for backup. Defaults to timestamp

        Returns:
            Path to backup directory
        """
        if label is None:
            label = datetime.now().strftime("%Y%m%d_%H%M%S")

        backup_path = self.backup_dir / label
        backup_path.mkdir(parents=True, exist_ok=True)

        with self._lock:
            for file in (self.users_file, self.teams_file, self.clocks_file):
                if file.exists():
                    shutil.copy2(file, backup_path / file.name)

        return backup_path

    # User operations

    def _check_unique(self, rows: list[dict[str, Any]], user: User) -> None:
        for row in rows:
            if int(row["id"]) == user.id:
                continue
            if row["email"].lower() == user.email.lower():
                raise ConflictError("Email already used")
            if row["username"] == user.username:
                raise ConflictError("Username already taken")

    def create_user(self, user: User) -> User:
        """Store a new user and assign its id.

        Raises:
            ConflictError: If the username or email is already taken
        """
        with self._lock:
            rows = self._read_csv(self.users_file)
            user.id = 0
            self._check_unique(rows, user)
            user.id = self._next_id(rows)
            rows.append(user.to_dict())
            self._write_csv_atomic(self.users_file, USER_FIELDS, rows)

        logger.info("Created user %s (%s)", user.id, user.role.value)
        return user

    def save_user(self, user: User) -> User:
        """Update an existing user.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the new username or email is already taken
        """
        with self._lock:
            rows = self._read_csv(self.users_file)
            self._check_unique(rows, user)
            user.updated_at = utcnow()

            for i, row in enumerate(rows):
                if int(row["id"]) == user.id:
                    rows[i] = user.to_dict()
                    break
            else:
                raise NotFoundError("User not found")

            self._write_csv_atomic(self.users_file, USER_FIELDS, rows)

        return user

    def load_users(self) -> list[User]:
        """Load all users ordered by id."""
        rows = self._read_csv(self.users_file)
        return sorted((User.from_dict(row) for row in rows), key=lambda u: u.id)

    def get_user(self, user_id: int) -> Optional[User]:
        """Find a user by id."""
        for user in self.load_users():
            if user.id == user_id:
                return user
        return None

    def find_user_by_credentials(self, identifier: str) -> Optional[User]:
        """Find a user by username or email address."""
        lowered = identifier.lower()
        for user in self.load_users():
            if user.username == identifier or user.email.lower() == lowered:
                return user
        return None

    def delete_user(self, user_id: int) -> bool:
        """Delete a user together with their clock events.

        Teams the user managed lose their manager reference.

        Returns:
            True if the user was deleted, False if not found
        """
        with self._lock:
            rows = self._read_csv(self.users_file)
            remaining = [r for r in rows if int(r["id"]) != user_id]
            if len(remaining) == len(rows):
                return False

            self._write_csv_atomic(self.users_file, USER_FIELDS, remaining)

            clocks = [r for r in self._read_csv(self.clocks_file) if int(r["user_id"]) != user_id]
            self._write_csv_atomic(self.clocks_file, CLOCK_FIELDS, clocks)

            teams = self._read_csv(self.teams_file)
            for row in teams:
                if row.get("manager_id") and int(row["manager_id"]) == user_id:
                    row["manager_id"] = ""
            self._write_csv_atomic(self.teams_file, TEAM_FIELDS, teams)

        logger.info("Deleted user %s and their clock events", user_id)
        return True

    # Team operations

    def create_team(self, team: Team) -> Team:
        """Store a new team and assign its id."""
        with self._lock:
            rows = self._read_csv(self.teams_file)
            team.id = self._next_id(rows)
            rows.append(team.to_dict())
            self._write_csv_atomic(self.teams_file, TEAM_FIELDS, rows)

        logger.info("Created team %s", team.id)
        return team

    def save_team(self, team: Team) -> Team:
        """Update an existing team.

        Raises:
            NotFoundError: If the team does not exist
        """
        with self._lock:
            rows = self._read_csv(self.teams_file)
            team.updated_at = utcnow()

            for i, row in enumerate(rows):
                if int(row["id"]) == team.id:
                    rows[i] = team.to_dict()
                    break
            else:
                raise NotFoundError("Team not found")

            self._write_csv_atomic(self.teams_file, TEAM_FIELDS, rows)

        return team

    def load_teams(self) -> list[Team]:
        """Load all teams ordered by id."""
        rows = self._read_csv(self.teams_file)
        return sorted((Team.from_dict(row) for row in rows), key=lambda t: t.id)

    def get_team(self, team_id: int) -> Optional[Team]:
        """Find a team by id."""
        for team in self.load_teams():
            if team.id == team_id:
                return team
        return None

    def team_members(self, team_id: int) -> list[User]:
        """Users whose team reference points at the team."""
        return [u for u in self.load_users() if u.team_id == team_id]

    def set_team_members(self, team_id: int, user_ids: list[int]) -> int:
        """Move the given users into the team.

        Unknown ids are ignored. Users already in the team stay there.

        Returns:
            Number of users updated
        """
        wanted = set(user_ids)
        updated = 0

        with self._lock:
            rows = self._read_csv(self.users_file)
            now = utcnow().isoformat()
            for row in rows:
                if int(row["id"]) in wanted:
                    row["team_id"] = team_id
                    row["updated_at"] = now
                    updated += 1
            self._write_csv_atomic(self.users_file, USER_FIELDS, rows)

        return updated

    def delete_team(self, team_id: int) -> bool:
        """Delete a team and detach its members.

        Returns:
            True if the team was deleted, False if not found
        """
        with self._lock:
            rows = self._read_csv(self.teams_file)
            remaining = [r for r in rows if int(r["id"]) != team_id]
            if len(remaining) == len(rows):
                return False

            self._write_csv_atomic(self.teams_file, TEAM_FIELDS, remaining)

            users = self._read_csv(self.users_file)
            for row in users:
                if row.get("team_id") and int(row["team_id"]) == team_id:
                    row["team_id"] = ""
            self._write_csv_atomic(self.users_file, USER_FIELDS, users)

        logger.info("Deleted team %s", team_id)
        return True

    # Clock event operations

    def append_clock_event(
        self, user_id: int, status: bool, time: Optional[datetime] = None
    ) -> ClockEvent:
        """Append a new immutable clock event.

        Args:
            user_id: Owner of the event
            status: True for clock-in, False for clock-out
            time: Event time. Defaults to now (UTC)

        Returns:
            The stored event
        """
        with self._lock:
            rows = self._read_csv(self.clocks_file)
            event = ClockEvent(
                id=self._next_id(rows),
                user_id=user_id,
                time=ensure_utc(time) if time else utcnow(),
                status=status,
            )
            self._append_csv_row(self.clocks_file, CLOCK_FIELDS, event.to_dict())

        return event

    def _load_user_events(self, user_id: int) -> list[ClockEvent]:
        rows = self._read_csv(self.clocks_file)
        return [ClockEvent.from_dict(r) for r in rows if int(r["user_id"]) == user_id]

    def find_last_event(self, user_id: int) -> Optional[ClockEvent]:
        """Most recent event of a user; later writes win timestamp ties."""
        events = self._load_user_events(user_id)
        if not events:
            return None
        return max(events, key=lambda e: (e.time, e.id))

    def query_events(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[ClockEvent]:
        """Events of a user within an inclusive window, ascending by time.

        Args:
            user_id: Owner of the events
            start: Lower bound (inclusive), unbounded if None
            end: Upper bound (inclusive), unbounded if None
        """
        events = self._load_user_events(user_id)

        if start is not None:
            lower = ensure_utc(start)
            events = [e for e in events if e.time >= lower]
        if end is not None:
            upper = ensure_utc(end)
            events = [e for e in events if e.time <= upper]

        return sorted(events, key=lambda e: (e.time, e.id))
