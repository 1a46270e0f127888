"""
Class and workshop API endpoints.
"""

import datetime as dt
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gymdesk.core.schemas import error_responses
from gymdesk.db.session import get_db
from gymdesk.scheduling.schemas.class_session import (
    ClassCreate,
    ClassResponse,
    ClassUpdate,
    SchedulePreviewRequest,
    SchedulePreviewResponse,
)
from gymdesk.scheduling.services.class_service import (
    ClassService,
    preview_schedule,
    to_class_response,
)
from gymdesk.staff.dependencies import get_current_staff, require_capability
from gymdesk.staff.models.staff import Staff
from gymdesk.staff.permissions import Capability
from gymdesk.staff.schemas.staff import InstructorResponse

router = APIRouter(prefix="/classes", tags=["classes"])


@router.get("", response_model=list[ClassResponse])
def list_classes(
    date_from: dt.date | None = Query(None, description="First date to include"),
    date_to: dt.date | None = Query(None, description="Last date to include"),
    include_package_sessions: bool = Query(True),
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
) -> list[ClassResponse]:
    """
    List classes and workshops ordered by date.
    """
    classes = ClassService(db).list_classes(date_from, date_to, include_package_sessions)
    return [to_class_response(c) for c in classes]


@router.post(
    "/preview-schedule",
    response_model=SchedulePreviewResponse,
    responses=error_responses(422),
)
def preview_class_schedule(
    data: SchedulePreviewRequest,
    staff: Staff = Depends(get_current_staff),
) -> SchedulePreviewResponse:
    """
    Preview the session dates of a recurrence before creating anything.

    Returns:
        Dates, session count, end date and the per-session share of total_price

    Raises:
        422: Invalid recurrence pattern
    """
    return preview_schedule(data.to_pattern(), data.total_price)


@router.get("/my-schedule", response_model=list[ClassResponse])
def get_my_schedule(
    date_from: dt.date | None = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.VIEW_MY_SCHEDULE)),
) -> list[ClassResponse]:
    """
    Upcoming sessions taught by the calling staff member.
    """
    return [to_class_response(c) for c in ClassService(db).get_my_schedule(staff, date_from)]


@router.get("/instructors", response_model=list[InstructorResponse])
async def list_instructors(
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
) -> list[InstructorResponse]:
    """
    Active trainers and admins who can lead a class.
    """
    return await ClassService(db).list_instructors()


@router.post("", response_model=list[ClassResponse], status_code=status.HTTP_201_CREATED)
def create_classes(
    data: ClassCreate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.CREATE_CLASSES)),
) -> list[ClassResponse]:
    """
    Create a class, or one class per date when schedule_type is recurring.

    Raises:
        400: Instructor not found or inactive
        422: Invalid recurrence pattern
    """
    return [to_class_response(c) for c in ClassService(db).create_classes(data)]


@router.get("/{class_id}", response_model=ClassResponse)
def get_class(
    class_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
) -> ClassResponse:
    return to_class_response(ClassService(db).get_class(class_id))


@router.patch("/{class_id}", response_model=ClassResponse)
def update_class(
    class_id: uuid.UUID,
    data: ClassUpdate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.EDIT_CLASSES)),
) -> ClassResponse:
    return to_class_response(ClassService(db).update_class(class_id, data))


@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_class(
    class_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.DELETE_CLASSES)),
) -> None:
    """
    Delete a class. Package sessions are removed from their package.
    """
    ClassService(db).delete_class(class_id)
