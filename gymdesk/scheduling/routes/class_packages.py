"""
Class package API endpoints.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gymdesk.core.schemas import error_responses
from gymdesk.db.session import get_db
from gymdesk.scheduling.recurrence import per_session_price
from gymdesk.scheduling.schemas.class_session import (
    ClassPackageCreate,
    ClassPackageCreatedResponse,
    ClassPackageResponse,
    ClassPackageUpdate,
    ClassResponse,
    PackageSessionCreate,
)
from gymdesk.scheduling.services.class_service import (
    ClassService,
    to_class_response,
    to_package_response,
)
from gymdesk.staff.dependencies import get_current_staff, require_capability
from gymdesk.staff.models.staff import Staff
from gymdesk.staff.permissions import Capability

router = APIRouter(prefix="/class-packages", tags=["class-packages"])


@router.get("", response_model=list[ClassPackageResponse])
def list_class_packages(
    include_sessions: bool = True,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
) -> list[ClassPackageResponse]:
    """
    List class packages, newest start date first.
    """
    return [to_package_response(p, include_sessions) for p in ClassService(db).list_packages()]


@router.post(
    "",
    response_model=ClassPackageCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 422),
)
def create_class_package(
    data: ClassPackageCreate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.CREATE_CLASSES)),
) -> ClassPackageCreatedResponse:
    """
    Create a package and generate its sessions from the recurrence.

    Returns:
        Package id, number of sessions created and per-session price

    Raises:
        400: Instructor not found or inactive
        422: Invalid recurrence pattern or no sessions in range
    """
    package = ClassService(db).create_package(data)
    return ClassPackageCreatedResponse(
        package_id=package.id,
        total_classes=package.total_sessions,
        per_session_price=per_session_price(package.package_price, package.total_sessions),
    )


@router.get("/{package_id}", response_model=ClassPackageResponse)
def get_class_package(
    package_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
) -> ClassPackageResponse:
    return to_package_response(ClassService(db).get_package(package_id))


@router.patch("/{package_id}", response_model=ClassPackageResponse)
def update_class_package(
    package_id: uuid.UUID,
    data: ClassPackageUpdate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.EDIT_CLASSES)),
) -> ClassPackageResponse:
    return to_package_response(ClassService(db).update_package(package_id, data))


@router.get("/{package_id}/sessions", response_model=list[ClassResponse])
def get_package_sessions(
    package_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
) -> list[ClassResponse]:
    """
    Sessions of a package ordered by date.
    """
    return [to_class_response(s) for s in ClassService(db).get_package_sessions(package_id)]


@router.post(
    "/{package_id}/sessions",
    response_model=ClassResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_package_session(
    package_id: uuid.UUID,
    data: PackageSessionCreate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.EDIT_CLASSES)),
) -> ClassResponse:
    """
    Append a session to a package; total_sessions grows on every sibling.
    """
    return to_class_response(ClassService(db).add_session_to_package(package_id, data))


@router.delete("/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_class_package(
    package_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.DELETE_CLASSES)),
) -> None:
    """
    Delete a package and all of its sessions.
    """
    ClassService(db).delete_package(package_id)
