from decimal import Decimal
from typing import Any

import httpx
from jose import jwt

from gymdesk.core.config import settings


def assert_error_response(
    response: httpx.Response, status_code: int, code: str
) -> dict[str, Any]:
    """Assert the standard error envelope and return its ``error`` object."""
    assert response.status_code == status_code
    data = response.json()
    assert data["success"] is False
    assert data["error"]["code"] == code
    return data["error"]


def as_decimal(value: Any) -> Decimal:
    """Decimals travel as JSON strings; compare them numerically."""
    return Decimal(str(value))


def decode_jwt_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def set_access_token_cookie(client: httpx.AsyncClient, access_token: str) -> None:
    """Set the access token cookie on the test client."""
    client.cookies.set("access_token", access_token)
