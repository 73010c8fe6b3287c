"""Bearer-token authentication for the API.

Access and refresh tokens are HS256 JWTs signed with the configured secret
key. Access tokens carry the user id in ``sub`` and the role in ``role``;
refresh tokens carry ``type: "refresh"`` and no role.
"""

from datetime import timedelta
from typing import Any, Optional

from fastapi import Depends, Request  # type: ignore[import-untyped]
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer  # type: ignore[import-untyped]
from jose import JWTError, jwt  # type: ignore[import-untyped]

from time_manager.core.config import Settings
from time_manager.core.errors import AuthenticationError
from time_manager.core.models import Role, User, utcnow
from time_manager.core.policy import Requester

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# auto_error=False so a missing header goes through our own 401 handling
security = HTTPBearer(auto_error=False)


def create_access_token(
    data: dict[str, Any], secret_key: str, expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed JWT.

    Args:
        data: Claims to encode in the token
        secret_key: Secret key for signing
        expires_delta: Lifetime of the token (defaults to one hour)

    Returns:
        Encoded JWT token string

    Example:
        >>> token = create_access_token(
        ...     data={"sub": "1", "role": "employee"},
        ...     secret_key="your-secret-key",
        ...     expires_delta=timedelta(minutes=15),
        ... )
    """
    to_encode = data.copy()
    now = utcnow()
    expire = now + (expires_delta or timedelta(hours=1))
    to_encode.update({"exp": expire, "iat": now})

    encoded_jwt: str = jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)
    return encoded_jwt


def decode_token(token: str, secret_key: str) -> dict[str, Any]:
    """Verify a token's signature and expiry.

    Raises:
        AuthenticationError: If the token is invalid or expired
    """
    try:
        payload: dict[str, Any] = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")
    return payload


def create_token_pair(user: User, settings: Settings) -> dict[str, str]:
    """Issue an access token and a refresh token for a user.

    Returns:
        Dictionary with ``accessToken`` and ``refreshToken``
    """
    subject = str(user.id)
    access_token = create_access_token(
        data={"sub": subject, "role": user.role.value, "type": ACCESS_TOKEN_TYPE},
        secret_key=settings.secret_key,
        expires_delta=timedelta(minutes=settings.access_token_minutes),
    )
    refresh_token = create_access_token(
        data={"sub": subject, "type": REFRESH_TOKEN_TYPE},
        secret_key=settings.secret_key,
        expires_delta=timedelta(days=settings.refresh_token_days),
    )
    return {"accessToken": access_token, "refreshToken": refresh_token}


def get_settings(request: Request) -> Settings:
    """Settings frozen into the application at startup."""
    settings: Settings = request.app.state.settings
    return settings


def get_requester(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> Requester:
    """Resolve the bearer token into the requesting identity.

    Note:
        This is a dependency function for FastAPI endpoints.
        Use with Depends(get_requester) to protect endpoints.

    Raises:
        AuthenticationError: If the header is missing or the token invalid
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Authorization header required")

    payload = decode_token(credentials.credentials, settings.secret_key)

    if payload.get("type") == REFRESH_TOKEN_TYPE:
        raise AuthenticationError("Invalid or expired token")

    try:
        return Requester(id=int(payload["sub"]), role=Role(payload["role"]))
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid or expired token")
