"""Statistics schemas for the admin dashboard."""

from decimal import Decimal

from pydantic import BaseModel, Field


class MembershipKPI(BaseModel):
    """Membership package and subscription indicators."""

    total_packages: int = Field(description="All membership packages")
    active_packages: int = Field(description="Packages with status Active")
    total_subscriptions: int
    active_subscriptions: int
    paused_subscriptions: int
    cancelled_subscriptions: int
    total_revenue: Decimal = Field(description="Sum of amounts paid on all subscriptions")
    churn_rate: Decimal = Field(description="Cancelled subscriptions as a percentage of all")


class ScheduleKPI(BaseModel):
    """Class schedule indicators."""

    classes_this_week: int = Field(description="Sessions dated in the current Sunday-Saturday week")
    upcoming_sessions: int = Field(description="Active sessions in the next 7 days, today included")
    class_packages: int


class DiscountKPI(BaseModel):
    """Discount code indicators."""

    active_codes: int
    total_usages: int
    total_discount_amount: Decimal


class DashboardSummaryResponse(BaseModel):
    memberships: MembershipKPI
    schedule: ScheduleKPI
    discounts: DiscountKPI
