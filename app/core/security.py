"""Password hashing and JWT access-token creation/verification."""

import secrets
from datetime import UTC, datetime
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.config import AuthConfig

if TYPE_CHECKING:
    from app.models.user import User

# Bcrypt cost (rounds) used when no explicit cost is given.
BCRYPT_ROUNDS = 12

# Access tokens are always HMAC-SHA-512.
JWT_ALGORITHM = "HS512"

# Claim names as emitted by .NET's JwtSecurityTokenHandler for Name, NameIdentifier and Role.
CLAIM_USERNAME = "unique_name"
CLAIM_USER_ID = "nameid"
CLAIM_ROLE = "role"

ADMIN_ROLE = "Admin"

REQUIRED_CLAIMS = ["exp", "iss", "aud", "sub", CLAIM_USER_ID, CLAIM_ROLE]

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 100
PASSWORD_MIN_LEN = 1
PASSWORD_MAX_LEN = 128


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes never match."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


@lru_cache
def dummy_password_hash(rounds: int = BCRYPT_ROUNDS) -> str:
    """Digest of a random password, computed once per process and bcrypt cost."""
    return hash_password(secrets.token_hex(16), rounds=rounds)


def create_access_token(
    user: "User",
    config: AuthConfig,
    now: datetime | None = None,
) -> str:
    """
    Create a signed HS512 access token for user.

    Claims: sub and unique_name (username), nameid (user id), role, iss, aud,
    iat, nbf and exp (now + config.access_token_ttl).
    """
    if user is None:
        raise ValueError("Cannot issue an access token without a user")
    issued_at = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": user.username,
        CLAIM_USERNAME: user.username,
        CLAIM_USER_ID: str(user.id),
        CLAIM_ROLE: user.role,
        "iss": config.issuer,
        "aud": config.audience,
        "iat": issued_at,
        "nbf": issued_at,
        "exp": issued_at + config.access_token_ttl,
    }
    return jwt.encode(payload, config.token_secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, config: AuthConfig) -> dict[str, Any]:
    """
    Decode and validate an access token; return its claims.
    Checks signature, issuer, audience and expiry.
    Raises jwt.PyJWTError on invalid or expired token.
    """
    return jwt.decode(
        token,
        config.token_secret,
        algorithms=[JWT_ALGORITHM],
        audience=config.audience,
        issuer=config.issuer,
        options={"require": REQUIRED_CLAIMS},
    )
