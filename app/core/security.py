"""Session token verification.

Sessions are issued by the external identity provider as an HS256 JWT in a
cookie. This service only verifies them and reads the ``sub`` claim.
"""

from dataclasses import dataclass
from typing import Any

import structlog
from jose import JWTError, jwt

from app.core.config import settings
from app.core.exceptions import UnauthorizedError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity of the caller, threaded explicitly through every operation."""

    user_id: str


def decode_session_token(token: str) -> dict[str, Any]:
    """Decode and validate a session token. Raises JWTError on failure.

    An empty signing key never verifies anything: a token signed with ""
    would otherwise authenticate as any subject.
    """
    if not settings.jwt_secret_key:
        raise JWTError("JWT signing key is not configured")
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
    )


def authenticate_token(token: str | None) -> AuthenticatedUser:
    """Resolve a raw session token into an AuthenticatedUser.

    Raises UnauthorizedError when the token is missing, invalid, expired
    or carries no subject, or when no signing key is configured.
    """
    if not token:
        raise UnauthorizedError()
    try:
        claims = decode_session_token(token)
    except JWTError as e:
        logger.warning("session_token_rejected", error=str(e))
        raise UnauthorizedError() from e

    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        raise UnauthorizedError()
    return AuthenticatedUser(user_id=subject)
