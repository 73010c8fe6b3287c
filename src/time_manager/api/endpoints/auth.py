"""Authentication endpoints: register, login and token refresh."""

import logging

from fastapi import APIRouter, Depends, status  # type: ignore[import-untyped]

from time_manager.api.auth import REFRESH_TOKEN_TYPE, create_token_pair, decode_token, get_settings
from time_manager.api.dependencies import get_storage
from time_manager.api.models import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPairResponse,
    UserResponse,
)
from time_manager.core.config import Settings
from time_manager.core.errors import AuthenticationError, ConflictError, ValidationError
from time_manager.core.models import Role, User
from time_manager.core.security import (
    hash_password,
    is_strong_password,
    is_valid_email,
    verify_password,
)
from time_manager.core.storage import StorageManager

logger = logging.getLogger(__name__)

router = APIRouter()

REQUIRED_REGISTRATION_FIELDS = ["username", "email", "password", "first_name", "last_name"]


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    storage: StorageManager = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """Create an employee account and sign it in.

    Raises:
        ValidationError: On missing fields, bad email, weak password or a
            username/email that is already taken
    """
    fields = {
        name: (getattr(request, name) or "").strip() for name in REQUIRED_REGISTRATION_FIELDS
    }
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValidationError(f"Missing: {', '.join(missing)}")

    if not is_valid_email(fields["email"]):
        raise ValidationError("Invalid email format")
    password = request.password or ""
    if not is_strong_password(password):
        raise ValidationError("Password: 8+ chars, 1 uppercase, 1 number")

    user = User(
        username=fields["username"],
        email=fields["email"],
        password_hash=hash_password(password),
        first_name=fields["first_name"],
        last_name=fields["last_name"],
        phone_number=request.phone_number,
        role=Role.EMPLOYEE,
    )

    try:
        storage.create_user(user)
    except ConflictError as e:
        raise ValidationError(e.message)

    tokens = create_token_pair(user, settings)
    return AuthResponse(user=UserResponse.from_user(user), **tokens)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    storage: StorageManager = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """Sign in with username (or email) and password.

    Raises:
        ValidationError: If either field is missing
        AuthenticationError: If the credentials do not match
    """
    if not request.username or not request.password:
        raise ValidationError("Username/email and password required")

    user = storage.find_user_by_credentials(request.username)
    if user is None or not verify_password(request.password, user.password_hash):
        logger.info("Failed login attempt")
        raise AuthenticationError("Invalid credentials")

    tokens = create_token_pair(user, settings)
    return AuthResponse(user=UserResponse.from_user(user), **tokens)


@router.post("/refresh", response_model=TokenPairResponse)
async def refresh(
    request: RefreshRequest,
    storage: StorageManager = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> TokenPairResponse:
    """Exchange a refresh token for a new token pair.

    Raises:
        ValidationError: If the token is missing or is not a refresh token
        AuthenticationError: If the token is invalid or its user is gone
    """
    if not request.refreshToken:
        raise ValidationError("Refresh token required")

    try:
        payload = decode_token(request.refreshToken, settings.secret_key)
    except AuthenticationError:
        raise AuthenticationError("Invalid refresh token")

    if payload.get("type") != REFRESH_TOKEN_TYPE:
        raise ValidationError("Invalid refresh token")

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid refresh token")

    user = storage.get_user(user_id)
    if user is None:
        raise AuthenticationError("User not found")

    return TokenPairResponse(**create_token_pair(user, settings))
