"""
Staff API endpoints.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gymdesk.core import redis as cache
from gymdesk.core.constants import INSTRUCTORS_CACHE_KEY
from gymdesk.db.session import get_db
from gymdesk.staff.dependencies import get_current_staff, require_capability
from gymdesk.staff.models.staff import Staff, StaffRole
from gymdesk.staff.permissions import Capability, capabilities_for
from gymdesk.staff.schemas.staff import (
    CurrentStaffResponse,
    StaffCreate,
    StaffResponse,
    StaffUpdate,
)
from gymdesk.staff.services.staff_service import StaffService

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get("/me", response_model=CurrentStaffResponse)
def get_me(current_staff: Staff = Depends(get_current_staff)) -> CurrentStaffResponse:
    """
    Get the calling staff member with the capabilities of their role.
    """
    return CurrentStaffResponse(
        **StaffResponse.model_validate(current_staff).model_dump(),
        capabilities=sorted(capabilities_for(current_staff.role), key=lambda c: c.value),
    )


@router.get("", response_model=list[StaffResponse])
def list_staff(
    role: StaffRole | None = None,
    db: Session = Depends(get_db),
    admin: Staff = Depends(require_capability(Capability.MANAGE_STAFF)),
) -> list[StaffResponse]:
    """
    List staff members, optionally filtered by role.
    """
    return [StaffResponse.model_validate(s) for s in StaffService(db).list_staff(role)]


@router.post("", response_model=StaffResponse, status_code=status.HTTP_201_CREATED)
async def create_staff(
    data: StaffCreate,
    db: Session = Depends(get_db),
    admin: Staff = Depends(require_capability(Capability.MANAGE_STAFF)),
) -> StaffResponse:
    """
    Create a staff member.

    Raises:
        409: Email already registered
    """
    staff = StaffService(db).create_staff(data)
    await cache.invalidate(INSTRUCTORS_CACHE_KEY)
    return StaffResponse.model_validate(staff)


@router.patch("/{staff_id}", response_model=StaffResponse)
async def update_staff(
    staff_id: uuid.UUID,
    data: StaffUpdate,
    db: Session = Depends(get_db),
    admin: Staff = Depends(require_capability(Capability.MANAGE_STAFF)),
) -> StaffResponse:
    """
    Update role, contact details or active flag of a staff member.
    """
    staff = StaffService(db).update_staff(staff_id, data)
    await cache.invalidate(INSTRUCTORS_CACHE_KEY)
    return StaffResponse.model_validate(staff)
