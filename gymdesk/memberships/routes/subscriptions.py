"""
Membership subscription status endpoints.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gymdesk.db.session import get_db
from gymdesk.memberships.schemas.subscription import (
    SubscriptionResponse,
    SubscriptionStatusChange,
)
from gymdesk.memberships.services.subscription_service import SubscriptionService
from gymdesk.staff.dependencies import require_capability
from gymdesk.staff.models.staff import Staff
from gymdesk.staff.permissions import Capability

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
def get_subscription(
    subscription_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.VIEW_PACKAGES)),
) -> SubscriptionResponse:
    return SubscriptionResponse.model_validate(
        SubscriptionService(db).get_subscription(subscription_id)
    )


@router.post("/{subscription_id}/pause", response_model=SubscriptionResponse)
async def pause_subscription(
    subscription_id: uuid.UUID,
    data: SubscriptionStatusChange,
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.MANAGE_PACKAGES)),
) -> SubscriptionResponse:
    """
    Freeze an active subscription.

    Raises:
        400: Subscription is not active
    """
    subscription = await SubscriptionService(db).pause(subscription_id, data.reason)
    return SubscriptionResponse.model_validate(subscription)


@router.post("/{subscription_id}/resume", response_model=SubscriptionResponse)
async def resume_subscription(
    subscription_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.MANAGE_PACKAGES)),
) -> SubscriptionResponse:
    subscription = await SubscriptionService(db).resume(subscription_id)
    return SubscriptionResponse.model_validate(subscription)


@router.post("/{subscription_id}/cancel", response_model=SubscriptionResponse)
async def cancel_subscription(
    subscription_id: uuid.UUID,
    data: SubscriptionStatusChange,
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.MANAGE_PACKAGES)),
) -> SubscriptionResponse:
    """
    Cancel an active or paused subscription. Cancelled is final.
    """
    subscription = await SubscriptionService(db).cancel(subscription_id, data.reason)
    return SubscriptionResponse.model_validate(subscription)
