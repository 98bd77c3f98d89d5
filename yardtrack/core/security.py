"""Password hashing (bcrypt) and access tokens (PyJWT) for system users."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from yardtrack.core.config import settings

BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72

USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


def _password_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str) -> str:
    """bcrypt hash of plain_password, as stored in system_users.password_hash."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(plain_password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """True if plain_password matches hashed. A missing or unparsable hash never matches."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def password_length_ok(password: str) -> bool:
    return PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN


def create_access_token(sub: str, role: str, unit_id: str | None = None) -> str:
    """
    Signed access token for a system user.

    Claims: sub (user id), role, unit (unit id at login; informational only, the
    user record is re-read on every request), iat and exp.
    """
    issued_at = datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": sub,
        "role": role,
        "unit": unit_id,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, settings.JWT_SECRET.get_secret_value(), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verified claims of token. Raises jwt.PyJWTError if the signature is bad or the token expired."""
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )


def token_subject(token: str) -> str:
    """User id carried by token. Raises jwt.PyJWTError when it is invalid or has no usable sub."""
    sub = decode_access_token(token).get("sub")
    if not isinstance(sub, str) or not sub:
        raise jwt.InvalidTokenError("Token has no subject")
    return sub
