"""Usage statistics for membership packages.

``aggregate`` reduces a package's subscription records into counts per
status and revenue figures. It is a pure function: it reads nothing but its
arguments, so the same records in any order produce the same result.
"""

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from gymdesk.core.exceptions import UnknownStatusError, ValidationError
from gymdesk.memberships.models.subscription import SubscriptionStatus

if TYPE_CHECKING:
    from gymdesk.memberships.models.subscription import MembershipSubscription

CENTS = Decimal("0.01")
ZERO = Decimal("0")


@dataclass(frozen=True)
class SubscriptionRecord:
    id: uuid.UUID
    package_id: uuid.UUID
    status: str
    amount_paid: Decimal = ZERO

    def __post_init__(self) -> None:
        if Decimal(self.amount_paid) < 0:
            raise ValidationError(
                f"Amount paid cannot be negative: {self.amount_paid}", field="amount_paid"
            )

    @classmethod
    def from_subscription(cls, row: "MembershipSubscription") -> "SubscriptionRecord":
        return cls(
            id=row.id,
            package_id=row.package_id,
            status=row.status,
            amount_paid=Decimal(row.amount_paid or 0),
        )


@dataclass(frozen=True)
class UsageStats:
    package_id: uuid.UUID | None
    total_subscriptions: int = 0
    active_subscriptions: int = 0
    paused_subscriptions: int = 0
    cancelled_subscriptions: int = 0
    total_revenue: Decimal = ZERO
    average_lifetime_value: Decimal = ZERO
    churn_rate: Decimal = ZERO
    # No review or inquiry data is recorded, so these stay unavailable
    average_rating: Decimal | None = None
    conversion_rate: Decimal | None = None


def _ratio(numerator: Decimal, denominator: int) -> Decimal:
    if denominator <= 0:
        return ZERO
    return (numerator / denominator).quantize(CENTS, rounding=ROUND_HALF_UP)


def aggregate(
    package_id: uuid.UUID | None, records: Iterable[SubscriptionRecord]
) -> UsageStats:
    """Count subscriptions per status and sum their revenue.

    Args:
        package_id: Package the records belong to, or None for a
            cross-package summary.
        records: Subscription records in any order.

    Returns:
        UsageStats where active + paused + cancelled == total.

    Raises:
        UnknownStatusError: A record's status is not Active, Paused or
            Cancelled.
    """
    counts = dict.fromkeys(SubscriptionStatus, 0)
    revenue = ZERO

    for record in records:
        try:
            status = SubscriptionStatus(record.status)
        except ValueError:
            raise UnknownStatusError(str(record.status), record_id=str(record.id)) from None
        counts[status] += 1
        revenue += Decimal(record.amount_paid)

    total = sum(counts.values())
    cancelled = counts[SubscriptionStatus.CANCELLED]

    return UsageStats(
        package_id=package_id,
        total_subscriptions=total,
        active_subscriptions=counts[SubscriptionStatus.ACTIVE],
        paused_subscriptions=counts[SubscriptionStatus.PAUSED],
        cancelled_subscriptions=cancelled,
        total_revenue=revenue.quantize(CENTS, rounding=ROUND_HALF_UP),
        average_lifetime_value=_ratio(revenue, total),
        churn_rate=_ratio(Decimal(cancelled) * 100, total),
    )
