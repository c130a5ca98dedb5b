"""Password sign-in tokens for the scheduler API.

Tokens are HS256 JWTs carrying a ``pass_hash`` claim: changing the
configured password invalidates every token issued before the change.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Cookie, Depends

from config.settings import Settings, get_settings
from utils.error_handler import AuthConfigError, AuthError

logger = logging.getLogger("app")

ALGORITHM = "HS256"
TOKEN_COOKIE = "token"


class TokenError(Exception):
    """Raised when a token cannot be accepted"""


def create_token(settings: Settings, now: Optional[datetime] = None) -> str:
    """Issue a signed token for the configured password.

    Args:
        settings: Settings holding the password hash, secret key and TTL
        now: Issue time, defaults to the current UTC time

    Returns:
        Encoded JWT string
    """
    if now is None:
        now = datetime.now(timezone.utc)
    claims = {
        "iat": now,
        "exp": now + timedelta(hours=settings.TOKEN_TTL_HOURS),
        "pass_hash": settings.PASSWORD_HASH,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)


def validate_token(token: str, password_hash: str, secret_key: str) -> None:
    """Check a token's signature, expiry and password hash.

    Raises:
        TokenError: if the token is malformed, expired, signed with another
            key or algorithm, or issued for another password
    """
    try:
        claims = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except jwt.InvalidTokenError as e:
        raise TokenError(f"failed to parse token: {e}")

    if claims.get("pass_hash") != password_hash:
        raise TokenError("invalid password hash")


def require_auth(
    token: Optional[str] = Cookie(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """FastAPI dependency guarding task routes when a password is configured."""
    if not settings.AUTH_ENABLED:
        return

    if not token:
        logger.warning("auth: missing token cookie")
        raise AuthError("authentication required")
    if not settings.SECRET_KEY:
        logger.error("auth: authentication configuration is invalid: empty secret key")
        raise AuthConfigError()

    try:
        validate_token(token, settings.PASSWORD_HASH, settings.SECRET_KEY)
    except TokenError as e:
        logger.warning(f"auth: {e}")
        raise AuthError("invalid JWT token")
