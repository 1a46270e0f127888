"""
Member API endpoints.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gymdesk.core.constants import DEFAULT_MEMBER_ACTIVITY_LIMIT
from gymdesk.core.schemas import error_responses
from gymdesk.db.session import get_db
from gymdesk.members.models.member import MemberStatus
from gymdesk.members.schemas.belt import (
    BeltAwardCreate,
    BeltAwardResponse,
    BeltLevelCreate,
    BeltLevelResponse,
)
from gymdesk.members.schemas.member import (
    CheckInRequest,
    MemberActivityResponse,
    MemberCheckInResponse,
    MemberCreate,
    MemberResponse,
    MembershipStatusChange,
    MemberStatsResponse,
    MemberUpdate,
)
from gymdesk.members.services.belt_service import BeltService
from gymdesk.members.services.member_service import MemberService
from gymdesk.memberships.schemas.subscription import SubscriptionResponse
from gymdesk.staff.dependencies import require_capability
from gymdesk.staff.models.staff import Staff
from gymdesk.staff.permissions import Capability

router = APIRouter(prefix="/members", tags=["members"])

view_members = require_capability(Capability.VIEW_MEMBERS)
manage_members = require_capability(Capability.MANAGE_MEMBERS)


@router.get("", response_model=list[MemberResponse])
def list_members(
    membership_status: MemberStatus | None = None,
    q: str | None = Query(None, max_length=100),
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_members),
) -> list[MemberResponse]:
    """
    List members, newest first.

    ``q`` matches first name, last name or email (case-insensitive).
    Deactivated members are left out unless ``include_inactive`` is set.
    """
    members = MemberService(db).list_members(membership_status, q, include_inactive)
    return [MemberResponse.model_validate(m) for m in members]


@router.get("/stats", response_model=MemberStatsResponse)
def get_member_stats(
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_members),
) -> MemberStatsResponse:
    """
    Member counts per status, new joiners this month and revenue of active members.
    """
    stats = MemberService(db).get_member_stats()
    return MemberStatsResponse.model_validate(stats, from_attributes=True)


@router.get("/belt-levels", response_model=list[BeltLevelResponse])
def list_belt_levels(
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_members),
) -> list[BeltLevelResponse]:
    return [BeltLevelResponse.model_validate(b) for b in BeltService(db).list_belt_levels()]


@router.post(
    "/belt-levels",
    response_model=BeltLevelResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409),
)
def create_belt_level(
    data: BeltLevelCreate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_members),
) -> BeltLevelResponse:
    """
    Raises:
        409: The style already has a belt with this name
    """
    return BeltLevelResponse.model_validate(BeltService(db).create_belt_level(data))


@router.post(
    "",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409),
)
def create_member(
    data: MemberCreate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_members),
) -> MemberResponse:
    """
    Register a member. New members start with status No Membership.

    Raises:
        409: Email already registered
    """
    member = MemberService(db).create_member(data, staff)
    return MemberResponse.model_validate(member)


@router.get("/{member_id}", response_model=MemberResponse)
def get_member(
    member_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_members),
) -> MemberResponse:
    return MemberResponse.model_validate(MemberService(db).get_member(member_id))


@router.patch("/{member_id}", response_model=MemberResponse, responses=error_responses(409))
def update_member(
    member_id: uuid.UUID,
    data: MemberUpdate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_members),
) -> MemberResponse:
    member = MemberService(db).update_member(member_id, data, staff)
    return MemberResponse.model_validate(member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_member(
    member_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_members),
) -> None:
    """
    Deactivate a member. The record and its history are kept.
    """
    MemberService(db).deactivate_member(member_id, staff)


@router.post(
    "/{member_id}/status",
    response_model=MemberResponse,
    responses=error_responses(400),
)
def update_membership_status(
    member_id: uuid.UUID,
    data: MembershipStatusChange,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_members),
) -> MemberResponse:
    """
    Raises:
        400: Member is deactivated
    """
    member = MemberService(db).update_membership_status(
        member_id, data.status, staff, data.reason
    )
    return MemberResponse.model_validate(member)


@router.post(
    "/{member_id}/check-ins",
    response_model=MemberCheckInResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400),
)
def check_in_member(
    member_id: uuid.UUID,
    data: CheckInRequest,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_members),
) -> MemberCheckInResponse:
    """
    Record a visit, optionally for a class and paid with credits.

    Raises:
        400: Member is deactivated, has no active membership or credits,
            or has fewer credits than requested
        404: Member or class does not exist
    """
    check_in = MemberService(db).check_in_member(member_id, data, staff)
    return MemberCheckInResponse.model_validate(check_in)


@router.get("/{member_id}/check-ins", response_model=list[MemberCheckInResponse])
def list_check_ins(
    member_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_members),
) -> list[MemberCheckInResponse]:
    check_ins = MemberService(db).list_check_ins(member_id)
    return [MemberCheckInResponse.model_validate(c) for c in check_ins]


@router.get("/{member_id}/activities", response_model=list[MemberActivityResponse])
def list_member_activities(
    member_id: uuid.UUID,
    limit: int = Query(DEFAULT_MEMBER_ACTIVITY_LIMIT, ge=1, le=200),
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_members),
) -> list[MemberActivityResponse]:
    activities = MemberService(db).list_activities(member_id, limit)
    return [MemberActivityResponse.model_validate(a) for a in activities]


@router.get("/{member_id}/subscriptions", response_model=list[SubscriptionResponse])
def list_member_subscriptions(
    member_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_members),
) -> list[SubscriptionResponse]:
    subscriptions = MemberService(db).list_subscriptions(member_id)
    return [SubscriptionResponse.model_validate(s) for s in subscriptions]


@router.post(
    "/{member_id}/belt-awards",
    response_model=BeltAwardResponse,
    status_code=status.HTTP_201_CREATED,
)
def award_belt(
    member_id: uuid.UUID,
    data: BeltAwardCreate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_members),
) -> BeltAwardResponse:
    """
    Award a belt and make it the member's current belt.
    """
    award = BeltService(db).award_belt(member_id, data, staff)
    return BeltAwardResponse.model_validate(award)


@router.get("/{member_id}/belt-awards", response_model=list[BeltAwardResponse])
def list_belt_awards(
    member_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_members),
) -> list[BeltAwardResponse]:
    return [BeltAwardResponse.model_validate(a) for a in BeltService(db).list_awards(member_id)]
