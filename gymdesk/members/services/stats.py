"""Member counts and revenue for the members overview."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from gymdesk.members.models.member import Member, MembershipType, MemberStatus
from gymdesk.memberships.services.usage import CENTS, ZERO


@dataclass(frozen=True)
class MemberStats:
    total_members: int = 0
    active_members: int = 0
    paused_members: int = 0
    overdue_members: int = 0
    no_membership_count: int = 0
    new_this_month: int = 0
    recurring_revenue: Decimal = ZERO
    prepaid_revenue: Decimal = ZERO


def month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def summarize(members: Iterable[Member], since: datetime) -> MemberStats:
    """Count members per membership status and sum the revenue of active ones.

    Args:
        members: Member rows in any order.
        since: Members who joined at or after this instant count as new.

    Returns:
        MemberStats where the four status counts add up to the total.
        Recurring revenue sums monthly amounts, prepaid revenue sums total
        amounts; only Active members contribute.
    """
    counts = dict.fromkeys(MemberStatus, 0)
    new = 0
    recurring = ZERO
    prepaid = ZERO

    for member in members:
        status = MemberStatus(member.membership_status)
        counts[status] += 1
        if member.join_date >= since:
            new += 1
        if status is not MemberStatus.ACTIVE:
            continue
        if member.membership_type == MembershipType.RECURRING and member.monthly_amount:
            recurring += Decimal(member.monthly_amount)
        elif member.membership_type == MembershipType.PREPAID and member.total_amount:
            prepaid += Decimal(member.total_amount)

    return MemberStats(
        total_members=sum(counts.values()),
        active_members=counts[MemberStatus.ACTIVE],
        paused_members=counts[MemberStatus.PAUSED],
        overdue_members=counts[MemberStatus.OVERDUE],
        no_membership_count=counts[MemberStatus.NO_MEMBERSHIP],
        new_this_month=new,
        recurring_revenue=recurring.quantize(CENTS, rounding=ROUND_HALF_UP),
        prepaid_revenue=prepaid.quantize(CENTS, rounding=ROUND_HALF_UP),
    )
