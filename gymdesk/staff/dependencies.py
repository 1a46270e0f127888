import logging
import uuid
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Cookie, Depends
from sqlalchemy.orm import Session

from gymdesk.core import security
from gymdesk.core.exceptions import ForbiddenError, UnauthorizedError
from gymdesk.db.session import get_db
from gymdesk.staff.models.staff import Staff
from gymdesk.staff.permissions import Capability, has_capability

logger = logging.getLogger(__name__)


async def get_access_token_from_cookie(
    access_token: Annotated[str | None, Cookie()] = None,
) -> str:
    """Extract access token from cookie"""
    if not access_token:
        raise UnauthorizedError("Missing access token")
    return access_token


async def get_current_staff(
    access_token: str = Depends(get_access_token_from_cookie),
    db: Session = Depends(get_db),
) -> Staff:
    """Resolve the staff member named by the access token"""
    payload = security.decode_token(access_token)
    if payload is None or payload.get("type") != security.ACCESS_TOKEN_TYPE:
        raise UnauthorizedError("Could not validate credentials")

    subject: str | None = payload.get("sub")
    try:
        staff_id = uuid.UUID(str(subject))
    except ValueError:
        raise UnauthorizedError("Could not validate credentials") from None

    staff = db.get(Staff, staff_id)
    if staff is None:
        raise UnauthorizedError("Staff member not found")

    if not staff.is_active:
        raise ForbiddenError("Account is inactive")

    return staff


def require_capability(capability: Capability) -> Callable[..., Awaitable[Staff]]:
    """Build a dependency that admits only staff whose role holds ``capability``.

    Example:
        ```python
        @router.post("")
        def create(staff: Staff = Depends(require_capability(Capability.CREATE_CLASSES))):
            ...
        ```
    """

    async def dependency(current_staff: Staff = Depends(get_current_staff)) -> Staff:
        if not has_capability(current_staff.role, capability):
            logger.info(
                "Denied %s to staff %s with role %s",
                capability.value,
                current_staff.id,
                current_staff.role.value,
            )
            raise ForbiddenError(
                f"Role '{current_staff.role.value}' lacks '{capability.value}'",
                capability=capability.value,
            )
        return current_staff

    return dependency
