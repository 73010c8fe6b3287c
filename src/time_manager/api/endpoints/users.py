"""User management endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, status  # type: ignore[import-untyped]

from time_manager.api.auth import get_requester
from time_manager.api.dependencies import get_clock_service, get_storage
from time_manager.api.models import (
    CreateUserRequest,
    MessageResponse,
    UpdateUserRequest,
    UserResponse,
)
from time_manager.core.clock import ClockService
from time_manager.core.errors import AuthorizationError, NotFoundError, ValidationError
from time_manager.core.models import Role, User
from time_manager.core.policy import Requester, ensure_can_act_on, require_role
from time_manager.core.security import hash_password, is_valid_email
from time_manager.core.storage import StorageManager

logger = logging.getLogger(__name__)

router = APIRouter()

# Fields only a manager may change, even on their own account
MANAGER_ONLY_FIELDS = ("role", "team_id")


def _require_user(storage: StorageManager, user_id: int) -> User:
    user = storage.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _require_team(storage: StorageManager, team_id: Any) -> None:
    if team_id is not None and storage.get_team(team_id) is None:
        raise NotFoundError("Team not found")


@router.get("", response_model=list[UserResponse])
async def list_users(
    storage: StorageManager = Depends(get_storage),
    requester: Requester = Depends(get_requester),
) -> list[UserResponse]:
    """List all users (managers only)."""
    require_role(requester, Role.MANAGER)
    return [UserResponse.from_user(u) for u in storage.load_users()]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    storage: StorageManager = Depends(get_storage),
    requester: Requester = Depends(get_requester),
) -> UserResponse:
    """Get a user profile; employees may only read their own."""
    user = _require_user(storage, user_id)
    ensure_can_act_on(requester, user_id)
    return UserResponse.from_user(user)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequest,
    storage: StorageManager = Depends(get_storage),
    requester: Requester = Depends(get_requester),
) -> UserResponse:
    """Create a user with any role (managers only).

    Raises:
        ConflictError: If the username or email is already taken (409)
    """
    require_role(requester, Role.MANAGER)

    if not is_valid_email(request.email):
        raise ValidationError("Invalid email format")
    _require_team(storage, request.team_id)

    user = User(
        username=request.username,
        email=request.email,
        password_hash=hash_password(request.password),
        first_name=request.first_name,
        last_name=request.last_name,
        phone_number=request.phone_number,
        role=request.role,
        team_id=request.team_id,
    )
    storage.create_user(user)
    return UserResponse.from_user(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    request: UpdateUserRequest,
    storage: StorageManager = Depends(get_storage),
    requester: Requester = Depends(get_requester),
) -> UserResponse:
    """Update a user; employees may only update themselves.

    Raises:
        AuthorizationError: If an employee tries to change role or team
    """
    user = _require_user(storage, user_id)
    ensure_can_act_on(requester, user_id)

    changes = request.model_dump(exclude_unset=True)

    if not requester.is_manager and any(f in changes for f in MANAGER_ONLY_FIELDS):
        raise AuthorizationError("Insufficient permissions")

    if "email" in changes and not is_valid_email(changes["email"] or ""):
        raise ValidationError("Invalid email format")
    if "team_id" in changes:
        _require_team(storage, changes["team_id"])

    password = changes.pop("password", None)
    if password:
        user.password_hash = hash_password(password)

    for field_name, value in changes.items():
        if value is None and field_name not in ("phone_number", "team_id"):
            continue
        setattr(user, field_name, value)

    storage.save_user(user)
    logger.info("User %s updated by %s", user_id, requester.id)
    return UserResponse.from_user(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    storage: StorageManager = Depends(get_storage),
    clock_service: ClockService = Depends(get_clock_service),
    requester: Requester = Depends(get_requester),
) -> MessageResponse:
    """Delete a user and their clock events (managers only)."""
    require_role(requester, Role.MANAGER)
    if not storage.delete_user(user_id):
        raise NotFoundError("User not found")
    clock_service.forget_user(user_id)
    return MessageResponse(message="User deleted successfully")
