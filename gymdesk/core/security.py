"""Signed staff session tokens.

Staff authenticate with a short-lived JWT kept in the ``access_token`` cookie.
Accounts are provisioned by an administrator; this service issues and checks
tokens but never stores credentials.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from gymdesk.core.config import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


def create_access_token(claims: dict[str, Any], expires_minutes: int | None = None) -> str:
    issued_at = datetime.now(UTC)
    lifetime = timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        **claims,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "type": ACCESS_TOKEN_TYPE,
    }
    token: str = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return token


def decode_token(token: str) -> dict[str, Any] | None:
    """Claims of a valid, unexpired token, or None."""
    try:
        claims: dict[str, Any] = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError as exc:
        logger.debug("Rejected access token: %s", exc)
        return None
    return claims
