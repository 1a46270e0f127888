import logging
import uuid

from sqlalchemy.orm import Session

from gymdesk.core import redis as cache
from gymdesk.core.datetime_utils import utcnow
from gymdesk.core.exceptions import ValidationError
from gymdesk.core.repository import BaseRepository
from gymdesk.members.services.member_service import MemberService
from gymdesk.memberships.models.subscription import MembershipSubscription, SubscriptionStatus
from gymdesk.memberships.schemas.subscription import SubscriptionCreate
from gymdesk.memberships.services.package_service import (
    MembershipPackageService,
    usage_stats_cache_key,
)

logger = logging.getLogger(__name__)

# status -> statuses it may be entered from
ALLOWED_TRANSITIONS: dict[SubscriptionStatus, frozenset[SubscriptionStatus]] = {
    SubscriptionStatus.PAUSED: frozenset({SubscriptionStatus.ACTIVE}),
    SubscriptionStatus.ACTIVE: frozenset({SubscriptionStatus.PAUSED}),
    SubscriptionStatus.CANCELLED: frozenset({SubscriptionStatus.ACTIVE, SubscriptionStatus.PAUSED}),
}


class SubscriptionService:
    """Member subscriptions to membership packages.

    Every write drops the cached usage statistics of the affected package.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = BaseRepository(db, MembershipSubscription, resource="subscription")
        self.packages = MembershipPackageService(db)
        self.members = MemberService(db)

    async def create_subscription(
        self, package_id: uuid.UUID, data: SubscriptionCreate
    ) -> MembershipSubscription:
        self.packages.get_package(package_id)
        values = data.model_dump()
        if data.member_id is not None:
            member = self.members.get_member(data.member_id)
            if not member.is_active:
                raise ValidationError("Member is deactivated", field="member_id")
            values["member_name"] = member.full_name
            values["member_email"] = member.email

        subscription = self.repo.create(
            **values,
            package_id=package_id,
            status=SubscriptionStatus.ACTIVE.value,
        )
        await cache.invalidate(usage_stats_cache_key(package_id))
        logger.info("Subscription %s created for package %s", subscription.id, package_id)
        return subscription

    def list_subscriptions(self, package_id: uuid.UUID) -> list[MembershipSubscription]:
        self.packages.get_package(package_id)
        return (
            self.db.query(MembershipSubscription)
            .filter(MembershipSubscription.package_id == package_id)
            .order_by(MembershipSubscription.created_at.desc())
            .all()
        )

    def get_subscription(self, subscription_id: uuid.UUID) -> MembershipSubscription:
        return self.repo.get_or_raise(subscription_id, "Subscription not found")

    async def pause(
        self, subscription_id: uuid.UUID, reason: str | None = None
    ) -> MembershipSubscription:
        return await self._change_status(
            subscription_id, SubscriptionStatus.PAUSED, paused_at=utcnow(), pause_reason=reason
        )

    async def resume(self, subscription_id: uuid.UUID) -> MembershipSubscription:
        return await self._change_status(
            subscription_id, SubscriptionStatus.ACTIVE, paused_at=None, pause_reason=None
        )

    async def cancel(
        self, subscription_id: uuid.UUID, reason: str | None = None
    ) -> MembershipSubscription:
        return await self._change_status(
            subscription_id,
            SubscriptionStatus.CANCELLED,
            cancelled_at=utcnow(),
            cancellation_reason=reason,
        )

    async def _change_status(
        self,
        subscription_id: uuid.UUID,
        target: SubscriptionStatus,
        **fields: object,
    ) -> MembershipSubscription:
        subscription = self.get_subscription(subscription_id)
        allowed = {s.value for s in ALLOWED_TRANSITIONS[target]}
        if subscription.status not in allowed:
            raise ValidationError(
                f"Cannot change subscription from {subscription.status} to {target.value}",
                field="status",
            )

        subscription = self.repo.update(subscription, status=target.value, **fields)
        await cache.invalidate(usage_stats_cache_key(subscription.package_id))
        logger.info("Subscription %s is now %s", subscription.id, target.value)
        return subscription
