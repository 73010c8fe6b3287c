"""Team management endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status  # type: ignore[import-untyped]

from time_manager.api.auth import get_requester
from time_manager.api.dependencies import get_storage
from time_manager.api.models import (
    CreateTeamRequest,
    MessageResponse,
    TeamMembersRequest,
    TeamResponse,
    UpdateTeamRequest,
)
from time_manager.core.errors import NotFoundError, ValidationError
from time_manager.core.models import Role, Team
from time_manager.core.policy import Requester, require_role
from time_manager.core.storage import StorageManager

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_team(storage: StorageManager, team_id: int) -> Team:
    team = storage.get_team(team_id)
    if team is None:
        raise NotFoundError("Team not found")
    return team


def _check_manager(storage: StorageManager, manager_id: Optional[int]) -> None:
    if manager_id is not None and storage.get_user(manager_id) is None:
        raise NotFoundError("Manager not found")


def _team_response(storage: StorageManager, team: Team) -> TeamResponse:
    return TeamResponse.from_team(team, storage.team_members(team.id))


@router.get("", response_model=list[TeamResponse])
async def list_teams(
    storage: StorageManager = Depends(get_storage),
    _: Requester = Depends(get_requester),
) -> list[TeamResponse]:
    """List all teams with their members."""
    users = storage.load_users()
    return [
        TeamResponse.from_team(team, [u for u in users if u.team_id == team.id])
        for team in storage.load_teams()
    ]


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(
    team_id: int,
    storage: StorageManager = Depends(get_storage),
    _: Requester = Depends(get_requester),
) -> TeamResponse:
    """Get a team with its members."""
    return _team_response(storage, _require_team(storage, team_id))


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(
    request: CreateTeamRequest,
    storage: StorageManager = Depends(get_storage),
    requester: Requester = Depends(get_requester),
) -> TeamResponse:
    """Create a team (managers only)."""
    require_role(requester, Role.MANAGER)

    name = (request.name or "").strip()
    if not name:
        raise ValidationError("Team name required")
    _check_manager(storage, request.manager_id)

    team = storage.create_team(
        Team(name=name, description=request.description, manager_id=request.manager_id)
    )
    return _team_response(storage, team)


@router.put("/{team_id}", response_model=TeamResponse)
async def update_team(
    team_id: int,
    request: UpdateTeamRequest,
    storage: StorageManager = Depends(get_storage),
    requester: Requester = Depends(get_requester),
) -> TeamResponse:
    """Update a team's name, description or manager (managers only)."""
    require_role(requester, Role.MANAGER)
    team = _require_team(storage, team_id)

    changes = request.model_dump(exclude_unset=True)
    if "manager_id" in changes:
        _check_manager(storage, changes["manager_id"])

    for field_name, value in changes.items():
        if value is None and field_name == "name":
            continue
        setattr(team, field_name, value)

    storage.save_team(team)
    logger.info("Team %s updated by %s", team_id, requester.id)
    return _team_response(storage, team)


@router.put("/{team_id}/members", response_model=MessageResponse)
async def update_team_members(
    team_id: int,
    request: TeamMembersRequest,
    storage: StorageManager = Depends(get_storage),
    requester: Requester = Depends(get_requester),
) -> MessageResponse:
    """Move the listed users into the team (managers only)."""
    require_role(requester, Role.MANAGER)
    _require_team(storage, team_id)

    if request.userIds:
        count = storage.set_team_members(team_id, request.userIds)
        logger.info("Assigned %d users to team %s", count, team_id)

    return MessageResponse(message="Team members updated successfully")


@router.delete("/{team_id}", response_model=MessageResponse)
async def delete_team(
    team_id: int,
    storage: StorageManager = Depends(get_storage),
    requester: Requester = Depends(get_requester),
) -> MessageResponse:
    """Delete a team; its members become team-less (managers only)."""
    require_role(requester, Role.MANAGER)
    if not storage.delete_team(team_id):
        raise NotFoundError("Team not found")
    return MessageResponse(message="Team deleted successfully")
