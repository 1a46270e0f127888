"""
Tests for MembershipPackageService and SubscriptionService.
"""

import uuid
from decimal import Decimal

import pytest

from gymdesk.core.exceptions import (
    HasActiveDependentsError,
    NotFoundError,
    UnknownStatusError,
    ValidationError,
)
from gymdesk.memberships.models.package import MembershipPackage, PackageStatus
from gymdesk.memberships.models.subscription import MembershipSubscription
from gymdesk.memberships.schemas.package import (
    MembershipPackageCreate,
    MembershipPackageUpdate,
    PackageSearchParams,
)
from gymdesk.memberships.schemas.subscription import SubscriptionCreate
from gymdesk.memberships.services.package_service import (
    MembershipPackageService,
    validate_package_data,
)
from gymdesk.memberships.services.subscription_service import SubscriptionService
from tests.utils.factories import (
    create_membership_package_factory,
    create_subscription_factory,
)


class TestValidatePackageData:
    def test_should_accept_valid_package(self):
        data = MembershipPackageCreate(name="Monthly BJJ", sport_categories=["bjj"])

        assert validate_package_data(data) == []

    def test_should_report_every_problem(self):
        data = MembershipPackageCreate(
            name="BJ",
            duration=0,
            price=Decimal("-1"),
            is_unlimited=False,
            renewal_discount_percent=Decimal("150"),
            max_freeze_months=0,
            min_freeze_weeks=0,
        )

        assert validate_package_data(data) == [
            "Package name must be at least 3 characters long",
            "Duration must be greater than 0",
            "Price cannot be negative",
            "Must select at least one sport category or enable full access",
            "Must specify either weekly or monthly class limit for limited packages",
            "Renewal discount must be between 0 and 100 percent",
            "Maximum freeze months must be at least 1",
            "Minimum freeze weeks must be at least 1",
        ]

    def test_should_accept_full_access_without_categories(self):
        data = MembershipPackageCreate(name="All Access", is_full_access=True)

        assert validate_package_data(data) == []

    def test_should_accept_limited_package_with_monthly_limit(self):
        data = MembershipPackageCreate(
            name="8 Classes", sport_categories=["boxing"], is_unlimited=False,
            class_limit_per_month=8,
        )

        assert validate_package_data(data) == []


class TestCreateAndUpdate:
    def test_should_attribute_package_to_creator(self, db_session, test_admin):
        data = MembershipPackageCreate(name="Monthly BJJ", sport_categories=["bjj"])

        package = MembershipPackageService(db_session).create_package(data, test_admin)

        assert package.created_by == test_admin.id
        assert package.created_by_name == test_admin.full_name
        assert package.status is PackageStatus.ACTIVE

    def test_should_raise_validation_error_with_all_messages(self, db_session, test_admin):
        data = MembershipPackageCreate(name="BJ")

        with pytest.raises(ValidationError) as exc_info:
            MembershipPackageService(db_session).create_package(data, test_admin)

        assert len(exc_info.value.details["errors"]) == 2

    def test_should_validate_merged_values_on_update(self, db_session, test_admin):
        package = create_membership_package_factory(db_session)

        with pytest.raises(ValidationError):
            MembershipPackageService(db_session).update_package(
                package.id, MembershipPackageUpdate(sport_categories=[]), test_admin
            )

    def test_should_record_last_modifier(self, db_session, test_admin):
        package = create_membership_package_factory(db_session)

        updated = MembershipPackageService(db_session).update_package(
            package.id, MembershipPackageUpdate(price=Decimal("120")), test_admin
        )

        assert updated.price == Decimal("120")
        assert updated.last_modified_by == test_admin.id
        assert updated.last_modified_by_name == test_admin.full_name

    def test_should_clone_as_inactive_copy(self, db_session, test_admin):
        original = create_membership_package_factory(
            db_session, name="Monthly BJJ", display_order=3, is_popular=True
        )

        clone = MembershipPackageService(db_session).clone_package(
            original.id, "Monthly BJJ (copy)", test_admin
        )

        assert clone.id != original.id
        assert clone.name == "Monthly BJJ (copy)"
        assert clone.status is PackageStatus.INACTIVE
        assert clone.is_popular is False
        assert clone.display_order == 4
        assert clone.price == original.price


class TestDeletePackage:
    def test_should_delete_package_without_subscriptions(self, db_session):
        package = create_membership_package_factory(db_session)
        package_id = package.id

        MembershipPackageService(db_session).delete_package(package_id)

        assert db_session.get(MembershipPackage, package_id) is None

    @pytest.mark.parametrize("status", ["Active", "Paused"])
    def test_should_refuse_delete_with_live_subscriptions(self, db_session, status):
        package = create_membership_package_factory(db_session)
        create_subscription_factory(db_session, package, status=status)

        with pytest.raises(HasActiveDependentsError) as exc_info:
            MembershipPackageService(db_session).delete_package(package.id)

        assert exc_info.value.details["dependents"] == 1
        assert db_session.get(MembershipPackage, package.id) is not None

    def test_should_delete_cancelled_history_with_package(self, db_session):
        package = create_membership_package_factory(db_session)
        create_subscription_factory(db_session, package, status="Cancelled")
        package_id = package.id

        MembershipPackageService(db_session).delete_package(package_id)

        remaining = (
            db_session.query(MembershipSubscription)
            .filter(MembershipSubscription.package_id == package_id)
            .count()
        )
        assert remaining == 0

    def test_should_raise_not_found_for_missing_package(self, db_session):
        with pytest.raises(NotFoundError):
            MembershipPackageService(db_session).delete_package(uuid.uuid4())


class TestQueries:
    def test_should_list_by_display_order(self, db_session):
        second = create_membership_package_factory(db_session, display_order=2)
        first = create_membership_package_factory(db_session, display_order=1)

        packages = MembershipPackageService(db_session).list_packages()

        assert [p.id for p in packages] == [first.id, second.id]

    def test_should_list_only_active_packages(self, db_session):
        active = create_membership_package_factory(db_session)
        create_membership_package_factory(db_session, status=PackageStatus.ARCHIVED)

        packages = MembershipPackageService(db_session).list_active_packages()

        assert [p.id for p in packages] == [active.id]

    def test_should_search_by_text_price_and_category(self, db_session):
        match = create_membership_package_factory(
            db_session, name="Muay Thai Monthly", price="80", sport_categories=["muay_thai"]
        )
        create_membership_package_factory(
            db_session, name="Muay Thai Premium", price="200", sport_categories=["muay_thai"]
        )
        create_membership_package_factory(
            db_session, name="Boxing Monthly", price="80", sport_categories=["boxing"]
        )

        packages, total = MembershipPackageService(db_session).search_packages(
            PackageSearchParams(
                query="monthly", max_price=Decimal("100"), sport_categories=["muay_thai"]
            )
        )

        assert total == 1
        assert [p.id for p in packages] == [match.id]

    def test_should_sort_and_paginate_search(self, db_session):
        for price in ("30", "10", "20"):
            create_membership_package_factory(db_session, price=price)

        params = PackageSearchParams(sort="price", direction="desc", page=2, limit=2)
        packages, total = MembershipPackageService(db_session).search_packages(params)

        assert total == 3
        assert [p.price for p in packages] == [Decimal("10")]

    def test_should_find_packages_by_sport_category(self, db_session):
        bjj = create_membership_package_factory(db_session, sport_categories=["bjj", "mma"])
        full = create_membership_package_factory(
            db_session, sport_categories=["all"], is_full_access=True
        )
        create_membership_package_factory(db_session, sport_categories=["boxing"])

        service = MembershipPackageService(db_session)

        assert [p.id for p in service.get_packages_by_sport_category("mma")] == [bjj.id]
        assert [p.id for p in service.get_packages_by_sport_category("all")] == [full.id]

    def test_should_rank_popular_packages_by_subscriptions(self, db_session):
        quiet = create_membership_package_factory(db_session, display_order=1)
        busy = create_membership_package_factory(db_session, display_order=2)
        create_subscription_factory(db_session, busy)
        create_subscription_factory(db_session, busy)
        create_subscription_factory(db_session, quiet)

        packages = MembershipPackageService(db_session).get_popular_packages(limit=2)

        assert [p.id for p in packages] == [busy.id, quiet.id]

    def test_should_compute_usage_stats_from_subscriptions(self, db_session):
        package = create_membership_package_factory(db_session)
        create_subscription_factory(db_session, package, amount_paid="100")
        create_subscription_factory(db_session, package, status="Cancelled", amount_paid="50")

        stats = MembershipPackageService(db_session).compute_usage_stats(package.id)

        assert stats.total_subscriptions == 2
        assert stats.total_revenue == Decimal("150")
        assert stats.churn_rate == Decimal("50")

    def test_should_fail_usage_stats_on_unknown_status(self, db_session):
        package = create_membership_package_factory(db_session)
        create_subscription_factory(db_session, package, status="Expired")

        with pytest.raises(UnknownStatusError):
            MembershipPackageService(db_session).compute_usage_stats(package.id)


class TestSubscriptionLifecycle:
    @pytest.mark.asyncio
    async def test_should_create_active_subscription(self, test_app, db_session):
        package = create_membership_package_factory(db_session)
        data = SubscriptionCreate(
            member_name="Jo Member",
            member_email="jo@example.com",
            start_date="2024-01-01",
            amount_paid=Decimal("99"),
        )

        subscription = await SubscriptionService(db_session).create_subscription(package.id, data)

        assert subscription.status == "Active"
        assert subscription.package_id == package.id

    @pytest.mark.asyncio
    async def test_should_pause_resume_and_cancel(self, test_app, db_session):
        package = create_membership_package_factory(db_session)
        subscription = create_subscription_factory(db_session, package)
        service = SubscriptionService(db_session)

        paused = await service.pause(subscription.id, "Injury")
        assert paused.status == "Paused"
        assert paused.pause_reason == "Injury"
        assert paused.paused_at is not None

        resumed = await service.resume(subscription.id)
        assert resumed.status == "Active"
        assert resumed.paused_at is None

        cancelled = await service.cancel(subscription.id, "Moving away")
        assert cancelled.status == "Cancelled"
        assert cancelled.cancellation_reason == "Moving away"

    @pytest.mark.asyncio
    async def test_should_reject_invalid_transition(self, test_app, db_session):
        package = create_membership_package_factory(db_session)
        subscription = create_subscription_factory(db_session, package, status="Cancelled")

        with pytest.raises(ValidationError) as exc_info:
            await SubscriptionService(db_session).resume(subscription.id)

        assert exc_info.value.details["field"] == "status"
