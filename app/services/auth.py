"""Auth flows: register, login and refresh-token rotation."""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from app.core.config import AuthConfig
from app.core.security import (
    create_access_token,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from app.models.user import User
from app.repositories.users import (
    ConcurrentUpdateError,
    DuplicateUsernameError,
    UserStore,
)
from app.services.refresh_tokens import RefreshTokenManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    """Access token plus the refresh token that replaced the user's previous one."""

    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class UsernameTaken:
    username: str
    message: str = "Username already exists"


@dataclass(frozen=True)
class InvalidCredentials:
    message: str = "Username or password is incorrect"


@dataclass(frozen=True)
class InvalidRefreshToken:
    message: str = "Invalid refresh token"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AuthService:
    """
    Single entry point for the HTTP layer's auth endpoints.

    Expected failures come back as UsernameTaken, InvalidCredentials or
    InvalidRefreshToken values; unexpected persistence errors propagate.
    """

    def __init__(
        self,
        store: UserStore,
        config: AuthConfig,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._config = config
        self._clock = clock
        self._refresh_tokens = RefreshTokenManager(
            store, ttl=config.refresh_token_ttl, clock=clock
        )

    def register(
        self,
        username: str,
        password: str,
        role: str,
        email: str,
    ) -> User | UsernameTaken:
        """Create a user with a hashed password, unless the username is already taken."""
        if self._store.get_by_username(username) is not None:
            logger.info("Registration rejected: username=%s already exists", username)
            return UsernameTaken(username=username)
        user = User(
            id=uuid.uuid4(),
            username=username,
            email=email,
            role=role,
            password_hash=hash_password(password, rounds=self._config.bcrypt_rounds),
        )
        try:
            created = self._store.add(user)
        except DuplicateUsernameError:
            logger.info("Registration lost a race: username=%s already exists", username)
            return UsernameTaken(username=username)
        logger.info("Registered user_id=%s username=%s role=%s", created.id, username, role)
        return created

    def login(self, username: str, password: str) -> TokenPair | InvalidCredentials:
        """Verify credentials and issue a fresh access/refresh token pair."""
        user = self._store.get_by_username(username)
        if user is None:
            # Same bcrypt cost as a real mismatch so timing does not reveal unknown usernames.
            verify_password(password, dummy_password_hash(self._config.bcrypt_rounds))
            logger.info("Login failed for username=%s", username)
            return InvalidCredentials()
        if not verify_password(password, user.password_hash):
            logger.info("Login failed for username=%s", username)
            return InvalidCredentials()
        return self._issue_tokens(user)

    def refresh(
        self,
        user_id: uuid.UUID,
        refresh_token: str,
    ) -> TokenPair | InvalidRefreshToken:
        """Exchange a valid refresh token for a new access token and a rotated refresh token."""
        user = self._refresh_tokens.validate(user_id, refresh_token)
        if user is None:
            return InvalidRefreshToken()
        try:
            return self._issue_tokens(user)
        except ConcurrentUpdateError:
            logger.warning("Refresh lost rotation race for user_id=%s", user_id)
            return InvalidRefreshToken()

    def _issue_tokens(self, user: User) -> TokenPair:
        if user is None:
            raise ValueError("Cannot issue tokens without a user")
        access_token = create_access_token(user, self._config, now=self._clock())
        refresh_token = self._refresh_tokens.issue_and_persist(user)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)
