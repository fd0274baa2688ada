"""Password hashing, opaque tokens, and signed (JWT) tokens.

Nothing here touches the database. Signed-token failures are reported as
``InvalidSignatureError`` or ``TokenExpiredError`` so callers can log the cause
while answering the client the same way for both.
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from quizbank.utils import now as utc_now

JWT_ALGORITHM = "HS256"
RESERVED_CLAIMS = frozenset({"iat", "exp"})


class TokenError(Exception):
    """Base class for signed token verification failures."""


class InvalidSignatureError(TokenError):
    """Token is malformed, tampered with, or signed with another secret."""


class TokenExpiredError(TokenError):
    """Token signature is fine but its expiry has passed."""


def hash_secret(plaintext: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_secret(plaintext: str, hashed: str) -> bool:
    """Check plaintext against a bcrypt hash. A malformed hash never matches."""
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def random_opaque_token() -> str:
    """256 bits from the OS CSPRNG, hex encoded."""
    return secrets.token_hex(32)


def is_expired(expires_at: datetime, now: datetime) -> bool:
    """An expiry equal to now counts as expired."""
    return now >= expires_at


def sign_token(payload: dict[str, Any], secret: str, ttl: timedelta, now: datetime | None = None) -> str:
    """Sign payload as an HS256 JWT valid for ttl from now.

    ``iat`` and ``exp`` are added as float timestamps and must not be part of payload.
    """
    if RESERVED_CLAIMS & payload.keys():
        raise ValueError(f"Payload must not contain reserved claims: {sorted(RESERVED_CLAIMS & payload.keys())}")
    issued_at = now or utc_now()
    claims = {**payload, "iat": issued_at.timestamp(), "exp": (issued_at + ttl).timestamp()}
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)


def verify_token(token: str, secret: str, now: datetime | None = None) -> dict[str, Any]:
    """Verify signature and expiry, return the payload without iat/exp.

    Expiry is checked here instead of by PyJWT so that the clock can be injected.
    """
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"verify_exp": False, "verify_iat": False, "require": ["iat", "exp"]},
        )
    except jwt.InvalidTokenError as e:
        raise InvalidSignatureError(str(e)) from e

    try:
        expires_at = datetime.fromtimestamp(float(claims["exp"]), UTC)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidSignatureError("Invalid exp claim") from e

    if is_expired(expires_at, now or utc_now()):
        raise TokenExpiredError("Token has expired")

    return {key: value for key, value in claims.items() if key not in RESERVED_CLAIMS}
