"""
Tests for subscription usage aggregation.
"""

import uuid
from decimal import Decimal

import pytest

from gymdesk.core.exceptions import UnknownStatusError, ValidationError
from gymdesk.memberships.services.usage import SubscriptionRecord, aggregate
from tests.utils.factories import create_membership_package_factory, create_subscription_factory

PACKAGE_ID = uuid.uuid4()


def record(status: str, amount: str = "0") -> SubscriptionRecord:
    return SubscriptionRecord(
        id=uuid.uuid4(), package_id=PACKAGE_ID, status=status, amount_paid=Decimal(amount)
    )


class TestAggregate:
    def test_should_count_statuses_and_sum_revenue(self):
        stats = aggregate(
            PACKAGE_ID,
            [record("Active", "100"), record("Cancelled", "50"), record("Active", "75")],
        )

        assert stats.package_id == PACKAGE_ID
        assert stats.total_subscriptions == 3
        assert stats.active_subscriptions == 2
        assert stats.cancelled_subscriptions == 1
        assert stats.paused_subscriptions == 0
        assert stats.total_revenue == Decimal("225")
        assert stats.average_lifetime_value == Decimal("75")

    def test_should_compute_churn_rate_as_percentage(self):
        stats = aggregate(
            PACKAGE_ID,
            [record("Active"), record("Paused"), record("Cancelled")],
        )

        assert stats.churn_rate == Decimal("33.33")
        assert (
            stats.active_subscriptions + stats.paused_subscriptions + stats.cancelled_subscriptions
            == stats.total_subscriptions
        )

    def test_should_return_zeros_without_records(self):
        stats = aggregate(PACKAGE_ID, [])

        assert stats.total_subscriptions == 0
        assert stats.total_revenue == Decimal("0")
        assert stats.average_lifetime_value == Decimal("0")
        assert stats.churn_rate == Decimal("0")

    def test_should_not_depend_on_record_order(self):
        records = [record("Active", "10.10"), record("Paused", "20.20"), record("Cancelled", "5")]

        assert aggregate(PACKAGE_ID, records) == aggregate(PACKAGE_ID, list(reversed(records)))

    def test_should_leave_unrecorded_metrics_unavailable(self):
        stats = aggregate(PACKAGE_ID, [record("Active", "100")])

        assert stats.average_rating is None
        assert stats.conversion_rate is None

    @pytest.mark.parametrize("status", ["Expired", "active", ""])
    def test_should_reject_unknown_status(self, status):
        bad = record(status)

        with pytest.raises(UnknownStatusError) as exc_info:
            aggregate(PACKAGE_ID, [record("Active"), bad])

        assert exc_info.value.details["record_id"] == str(bad.id)
        assert exc_info.value.status_code == 500


class TestSubscriptionRecord:
    def test_should_reject_negative_amount_paid(self):
        with pytest.raises(ValidationError) as exc_info:
            record("Active", "-0.01")

        assert exc_info.value.details["field"] == "amount_paid"

    def test_should_accept_zero_amount_paid(self):
        assert record("Active", "0").amount_paid == Decimal("0")

    def test_should_reject_negative_amount_from_stored_subscription(
        self, db_session
    ):
        package = create_membership_package_factory(db_session)
        row = create_subscription_factory(db_session, package, amount_paid="-5")

        with pytest.raises(ValidationError):
            SubscriptionRecord.from_subscription(row)
