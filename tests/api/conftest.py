"""Shared fixtures for API tests."""

import tempfile
from pathlib import Path
from typing import Callable

import pytest  # type: ignore[import-not-found]
from fastapi.testclient import TestClient  # type: ignore[import-untyped]

from time_manager.api import create_app
from time_manager.api.auth import create_token_pair
from time_manager.core.config import ConfigManager
from time_manager.core.models import Role, User
from time_manager.core.security import hash_password
from time_manager.core.storage import StorageManager

PASSWORD = "Secret123"


@pytest.fixture
def test_config(temp_data_dir: Path):
    """Create test configuration pointing at a temporary data directory."""
    with tempfile.TemporaryDirectory() as config_tmpdir:
        config = ConfigManager(Path(config_tmpdir) / "config.yml")
        config.set("general.data_dir", str(temp_data_dir))
        yield config


@pytest.fixture
def client(test_config: ConfigManager):
    """Create test client."""
    return TestClient(create_app(test_config))


@pytest.fixture
def storage(client: TestClient) -> StorageManager:
    """Storage manager used by the app under test."""
    return client.app.state.storage


@pytest.fixture
def make_user(storage: StorageManager) -> Callable[..., User]:
    """Factory storing a user whose password is ``PASSWORD``."""

    def _make(username: str, role: Role = Role.EMPLOYEE, **kwargs) -> User:  # type: ignore[no-untyped-def]
        return storage.create_user(
            User(
                username=username,
                email=f"{username}@example.com",
                password_hash=hash_password(PASSWORD),
                first_name=username.title(),
                last_name="Test",
                role=role,
                **kwargs,
            )
        )

    return _make


@pytest.fixture
def manager(make_user: Callable[..., User]) -> User:
    return make_user("boss", Role.MANAGER)


@pytest.fixture
def employee(make_user: Callable[..., User]) -> User:
    return make_user("alice")


@pytest.fixture
def colleague(make_user: Callable[..., User]) -> User:
    return make_user("bob")


@pytest.fixture
def auth_headers(client: TestClient) -> Callable[[User], dict[str, str]]:
    """Build a bearer header for a user."""

    def _headers(user: User) -> dict[str, str]:
        tokens = create_token_pair(user, client.app.state.settings)
        return {"Authorization": f"Bearer {tokens['accessToken']}"}

    return _headers
