"""Security utilities - password hashing and access tokens."""

from src.movieclub.core.security.crypto import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_token,
    dummy_password_hash,
    hash_password,
    password_needs_rehash,
    resolve_token,
    verify_password,
)

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "create_access_token",
    "decode_token",
    "dummy_password_hash",
    "hash_password",
    "password_needs_rehash",
    "resolve_token",
    "verify_password",
]
