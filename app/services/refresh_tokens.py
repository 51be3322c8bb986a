"""Refresh tokens: opaque random values stored on the user row and rotated on use."""

import base64
import hmac
import logging
import secrets
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from app.models.user import User
from app.repositories.users import UserStore

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 32
DEFAULT_REFRESH_TOKEN_TTL = timedelta(minutes=30)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def generate_refresh_token() -> str:
    """Return 32 bytes from the OS CSPRNG, base64-encoded."""
    return base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")


class RefreshTokenManager:
    """Issues, persists and validates the single active refresh token of each user."""

    def __init__(
        self,
        store: UserStore,
        ttl: timedelta = DEFAULT_REFRESH_TOKEN_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._ttl = ttl
        self._clock = clock

    def issue_and_persist(self, user: User) -> str:
        """
        Generate a new refresh token, store it with its expiry on user and persist.

        Any previous token of the user stops being valid. Propagates
        ConcurrentUpdateError when another request rotated the token first.
        """
        token = generate_refresh_token()
        user.refresh_token = token
        user.refresh_token_expiry = self._clock() + self._ttl
        self._store.save(user)
        return token

    def validate(self, user_id: uuid.UUID, presented_token: str) -> User | None:
        """
        Return the user if presented_token is their current, unexpired refresh token.

        Returns None (never raises) for an unknown user, a missing or different
        stored token, or an expiry at or before now. Does not modify the user.
        """
        user = self._store.get_by_id(user_id)
        if user is None:
            logger.info("Refresh rejected: unknown user_id=%s", user_id)
            return None
        if not user.refresh_token or user.refresh_token_expiry is None:
            logger.info("Refresh rejected: no active token for user_id=%s", user_id)
            return None
        if not hmac.compare_digest(
            user.refresh_token.encode("utf-8"), presented_token.encode("utf-8")
        ):
            logger.info("Refresh rejected: token mismatch for user_id=%s", user_id)
            return None
        expiry = user.refresh_token_expiry
        # SQLite hands back naive datetimes; everything is stored in UTC.
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        if expiry <= self._clock():
            logger.info("Refresh rejected: token expired for user_id=%s", user_id)
            return None
        return user
