"""
Tests for member statistics.
"""

import datetime as dt
from decimal import Decimal

from gymdesk.members.models.member import Member, MembershipType, MemberStatus
from gymdesk.members.services.stats import MemberStats, month_start, summarize

SINCE = dt.datetime(2024, 3, 1)


def member(
    status: MemberStatus,
    membership_type: MembershipType = MembershipType.RECURRING,
    joined: dt.datetime = dt.datetime(2024, 1, 15),
    monthly: str | None = None,
    total: str | None = None,
) -> Member:
    return Member(
        membership_status=status,
        membership_type=membership_type,
        join_date=joined,
        monthly_amount=Decimal(monthly) if monthly else None,
        total_amount=Decimal(total) if total else None,
    )


class TestMonthStart:
    def test_should_truncate_to_first_day_at_midnight(self):
        assert month_start(dt.datetime(2024, 3, 17, 15, 42, 7, 12)) == dt.datetime(2024, 3, 1)


class TestSummarize:
    def test_should_count_each_status(self):
        stats = summarize(
            [
                member(MemberStatus.ACTIVE),
                member(MemberStatus.ACTIVE),
                member(MemberStatus.PAUSED),
                member(MemberStatus.OVERDUE),
                member(MemberStatus.NO_MEMBERSHIP),
            ],
            SINCE,
        )

        assert stats.total_members == 5
        assert stats.active_members == 2
        assert stats.paused_members == 1
        assert stats.overdue_members == 1
        assert stats.no_membership_count == 1

    def test_should_count_members_joined_since_month_start(self):
        stats = summarize(
            [
                member(MemberStatus.ACTIVE, joined=dt.datetime(2024, 2, 29, 23, 59)),
                member(MemberStatus.ACTIVE, joined=SINCE),
                member(MemberStatus.NO_MEMBERSHIP, joined=dt.datetime(2024, 3, 10)),
            ],
            SINCE,
        )

        assert stats.new_this_month == 2

    def test_should_sum_revenue_of_active_members_only(self):
        stats = summarize(
            [
                member(MemberStatus.ACTIVE, monthly="99.50"),
                member(MemberStatus.ACTIVE, monthly="50"),
                member(MemberStatus.PAUSED, monthly="99"),
                member(MemberStatus.ACTIVE, MembershipType.PREPAID, total="600"),
                member(MemberStatus.OVERDUE, MembershipType.PREPAID, total="300"),
            ],
            SINCE,
        )

        assert stats.recurring_revenue == Decimal("149.50")
        assert stats.prepaid_revenue == Decimal("600.00")

    def test_should_ignore_amount_of_the_other_membership_type(self):
        stats = summarize(
            [member(MemberStatus.ACTIVE, MembershipType.PREPAID, monthly="80", total="400")],
            SINCE,
        )

        assert stats.recurring_revenue == Decimal("0")
        assert stats.prepaid_revenue == Decimal("400.00")

    def test_should_return_zeros_without_members(self):
        assert summarize([], SINCE) == MemberStats()
