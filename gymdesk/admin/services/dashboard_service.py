"""Dashboard statistics service."""

from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from gymdesk.admin.schemas.dashboard import (
    DashboardSummaryResponse,
    DiscountKPI,
    MembershipKPI,
    ScheduleKPI,
)
from gymdesk.core.constants import UPCOMING_SESSIONS_WINDOW_DAYS
from gymdesk.core.datetime_utils import utcnow
from gymdesk.discounts.models.discount import Discount, DiscountStatus
from gymdesk.discounts.models.usage import DiscountUsage
from gymdesk.discounts.utils import effective_status
from gymdesk.memberships.models.package import MembershipPackage, PackageStatus
from gymdesk.memberships.models.subscription import MembershipSubscription
from gymdesk.memberships.services.usage import SubscriptionRecord, aggregate
from gymdesk.scheduling.models.class_session import ClassPackage, ClassSession
from gymdesk.scheduling.recurrence import weekday_of


class DashboardService:
    """Service for dashboard summary aggregation."""

    @staticmethod
    def _membership_kpis(db: Session) -> MembershipKPI:
        total_packages = db.query(func.count(MembershipPackage.id)).scalar() or 0
        active_packages = (
            db.query(func.count(MembershipPackage.id))
            .filter(MembershipPackage.status == PackageStatus.ACTIVE)
            .scalar()
        ) or 0

        records = [
            SubscriptionRecord.from_subscription(s) for s in db.query(MembershipSubscription)
        ]
        usage = aggregate(None, records)

        return MembershipKPI(
            total_packages=total_packages,
            active_packages=active_packages,
            total_subscriptions=usage.total_subscriptions,
            active_subscriptions=usage.active_subscriptions,
            paused_subscriptions=usage.paused_subscriptions,
            cancelled_subscriptions=usage.cancelled_subscriptions,
            total_revenue=usage.total_revenue,
            churn_rate=usage.churn_rate,
        )

    @staticmethod
    def _schedule_kpis(db: Session, today: date) -> ScheduleKPI:
        week_start = today - timedelta(days=weekday_of(today))
        week_end = week_start + timedelta(days=6)
        window_end = today + timedelta(days=UPCOMING_SESSIONS_WINDOW_DAYS)

        classes_this_week = (
            db.query(func.count(ClassSession.id))
            .filter(ClassSession.date >= week_start, ClassSession.date <= week_end)
            .scalar()
        ) or 0
        upcoming = (
            db.query(func.count(ClassSession.id))
            .filter(
                ClassSession.date >= today,
                ClassSession.date < window_end,
                ClassSession.is_active == True,  # noqa: E712
            )
            .scalar()
        ) or 0
        class_packages = db.query(func.count(ClassPackage.id)).scalar() or 0

        return ScheduleKPI(
            classes_this_week=classes_this_week,
            upcoming_sessions=upcoming,
            class_packages=class_packages,
        )

    @staticmethod
    def _discount_kpis(db: Session) -> DiscountKPI:
        now = utcnow()
        active_codes = sum(
            1
            for d in db.query(Discount).filter(Discount.is_active == True)  # noqa: E712
            if effective_status(d, now) is DiscountStatus.ACTIVE
        )
        total_usages, total_amount = db.query(
            func.count(DiscountUsage.id), func.coalesce(func.sum(DiscountUsage.discount_amount), 0)
        ).one()

        return DiscountKPI(
            active_codes=active_codes,
            total_usages=total_usages or 0,
            total_discount_amount=Decimal(total_amount).quantize(Decimal("0.01")),
        )

    @staticmethod
    def get_summary(db: Session, today: date | None = None) -> DashboardSummaryResponse:
        """Get the dashboard summary.

        Args:
            db: Database session.
            today: Reference date for the weekly and upcoming counts;
                defaults to the current UTC date.

        Raises:
            UnknownStatusError: A subscription carries an unknown status.
        """
        today = today or utcnow().date()
        return DashboardSummaryResponse(
            memberships=DashboardService._membership_kpis(db),
            schedule=DashboardService._schedule_kpis(db, today),
            discounts=DashboardService._discount_kpis(db),
        )
