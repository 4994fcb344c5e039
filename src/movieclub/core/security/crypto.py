"""Password hashing (Argon2id) and JWT access tokens."""

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any
from uuid import UUID

import argon2
from jose import JWTError, jwt

from src.movieclub.core.config import get_settings

ACCESS_TOKEN_TYPE = "access"


@lru_cache
def _password_hasher() -> argon2.PasswordHasher:
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


@lru_cache
def dummy_password_hash() -> str:
    """A hash no user input matches.

    Verified against when the email is unknown so both login paths cost the same.
    """
    return _password_hasher().hash("movieclub-timing-equalizer")


def hash_password(password: str) -> str:
    return _password_hasher().hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """True only for a matching password; malformed hashes never match."""
    try:
        return _password_hasher().verify(hashed, password)
    except (argon2.exceptions.VerificationError, argon2.exceptions.InvalidHashError):
        return False


def password_needs_rehash(hashed: str) -> bool:
    """Whether hashed was produced with weaker parameters than the current ones."""
    try:
        return _password_hasher().check_needs_rehash(hashed)
    except argon2.exceptions.InvalidHashError:
        return True


def create_access_token(subject: str | UUID, expires_delta: timedelta | None = None) -> str:
    """Signed token naming a user; valid ACCESS_TOKEN_EXPIRE_DAYS unless overridden."""
    settings = get_settings()
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(days=settings.access_token_expire_days)

    claims = {
        "sub": str(subject),
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(  # type: ignore[no-any-return]
        claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )


def decode_token(token: str) -> dict[str, Any] | None:
    """Verified claims, or None for a bad signature, expiry or malformed token."""
    settings = get_settings()
    try:
        return jwt.decode(  # type: ignore[no-any-return]
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None


def resolve_token(token: str) -> UUID | None:
    """Return the user id carried by a valid access token, or None.

    Expired, tampered, malformed and wrong-type tokens are indistinguishable
    to the caller.
    """
    claims = decode_token(token)
    if claims is None or claims.get("type") != ACCESS_TOKEN_TYPE:
        return None

    try:
        return UUID(str(claims["sub"]))
    except (KeyError, ValueError):
        return None
