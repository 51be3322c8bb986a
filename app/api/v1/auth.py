"""Register/login/refresh endpoints and auth dependencies (get_current_user, require_admin)."""

import uuid
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import AuthConfig, get_auth_config
from app.core.database import get_db
from app.core.security import (
    ADMIN_ROLE,
    CLAIM_ROLE,
    CLAIM_USER_ID,
    CLAIM_USERNAME,
    decode_access_token,
)
from app.repositories.users import ConcurrentUpdateError, SqlAlchemyUserStore
from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from app.services.auth import AuthService, TokenPair, UsernameTaken

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
) -> AuthService:
    """Dependency: AuthService bound to the request's DB session."""
    return AuthService(SqlAlchemyUserStore(db), config)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/register", response_model=UserResponse)
def register(
    body: RegisterRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> UserResponse:
    """Create an account. The response never includes the password hash."""
    result = auth.register(body.username, body.password, body.role, body.email)
    if isinstance(result, UsernameTaken):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)
    return UserResponse.model_validate(result)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns an access token and a refresh token.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    try:
        result = auth.login(body.username, body.password)
    except ConcurrentUpdateError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Concurrent login for this user; retry the request.",
        )
    if not isinstance(result, TokenPair):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)
    return TokenResponse(access_token=result.access_token, refresh_token=result.refresh_token)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    body: RefreshRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """Exchange the current refresh token for a new access token and a rotated refresh token."""
    result = auth.refresh(body.user_id, body.refresh_token)
    if not isinstance(result, TokenPair):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=result.message)
    return TokenResponse(access_token=result.access_token, refresh_token=result.refresh_token)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
) -> CurrentUser:
    """Dependency: require a valid Bearer access token and return its user. Raises 401 otherwise."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials, config)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    username = payload.get(CLAIM_USERNAME) or payload.get("sub")
    role = payload.get(CLAIM_ROLE)
    try:
        user_id = uuid.UUID(str(payload.get(CLAIM_USER_ID)))
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token payload")
    if not username or not isinstance(role, str):
        raise _unauthorized("Invalid token payload")
    return CurrentUser(id=user_id, username=username, role=role)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'Admin'. Raises 403 for non-admin."""
    if current_user.role != ADMIN_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.get("")
def authenticated_only(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> str:
    """Probe endpoint: succeeds for any valid access token."""
    return "You are authenticated"


@router.get("/admin-only")
def admin_only(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> str:
    """Probe endpoint: succeeds only for the Admin role."""
    return "You are an admin"
