"""
Tests for DiscountService - code management, validation and redemption.
"""

import datetime as dt
from decimal import Decimal

import pytest

from gymdesk.core.exceptions import ConflictError, ValidationError
from gymdesk.discounts.models.discount import (
    Discount,
    DiscountAppliesTo,
    DiscountStatus,
    DiscountType,
)
from gymdesk.discounts.models.usage import DiscountItemType
from gymdesk.discounts.schemas.discount import (
    DiscountApplyRequest,
    DiscountCheckRequest,
    DiscountCreate,
    DiscountUpdate,
)
from gymdesk.discounts.services.discount_service import (
    DiscountService,
    validate_discount_data,
)
from tests.utils.factories import create_discount_factory


def check_request(code: str, **overrides) -> DiscountCheckRequest:
    values = {
        "code": code,
        "item_type": DiscountItemType.CLASS,
        "item_id": "class-1",
        "amount": Decimal("50"),
    }
    values.update(overrides)
    return DiscountCheckRequest(**values)


def apply_request(code: str, **overrides) -> DiscountApplyRequest:
    values = {
        "code": code,
        "item_type": DiscountItemType.PACKAGE,
        "item_id": "pkg-1",
        "item_name": "Monthly BJJ",
        "amount": Decimal("100"),
        "member_email": "jo@example.com",
    }
    values.update(overrides)
    return DiscountApplyRequest(**values)


class TestValidateDiscountData:
    def test_should_report_every_problem(self):
        data = DiscountCreate(
            code="A",
            name=" ",
            type=DiscountType.PERCENTAGE,
            value=Decimal("150"),
            max_uses=0,
            max_uses_per_user=0,
            start_date=dt.datetime(2024, 2, 1),
            end_date=dt.datetime(2024, 1, 1),
            applies_to=DiscountAppliesTo.SPECIFIC_ITEMS,
        )

        errors = validate_discount_data(data)

        assert len(errors) == 7
        assert "Discount name is required" in errors
        assert "Percentage must be between 1 and 100" in errors
        assert "End date must be after start date" in errors

    def test_should_reject_non_positive_fixed_amount(self):
        data = DiscountCreate(
            code="FLAT",
            name="Flat",
            type=DiscountType.FIXED_AMOUNT,
            value=Decimal("0"),
            start_date=dt.datetime(2024, 1, 1),
        )

        assert validate_discount_data(data) == ["Fixed amount must be greater than 0"]


class TestCreateDiscount:
    def test_should_store_code_upper_case(self, db_session, test_admin):
        data = DiscountCreate(
            code=" summer24 ",
            name="Summer",
            type=DiscountType.PERCENTAGE,
            value=Decimal("20"),
            start_date=dt.datetime(2024, 6, 1, tzinfo=dt.UTC),
        )

        discount = DiscountService(db_session).create_discount(data, test_admin)

        assert discount.code == "SUMMER24"
        assert discount.start_date == dt.datetime(2024, 6, 1)
        assert discount.current_uses == 0
        assert discount.created_by_name == test_admin.full_name

    def test_should_reject_duplicate_code(self, db_session, test_admin):
        create_discount_factory(db_session, code="SUMMER24")
        data = DiscountCreate(
            code="summer24",
            name="Summer again",
            type=DiscountType.PERCENTAGE,
            value=Decimal("10"),
            start_date=dt.datetime(2024, 6, 1),
        )

        with pytest.raises(ConflictError):
            DiscountService(db_session).create_discount(data, test_admin)

    def test_should_disable_and_reenable_on_update(self, db_session):
        discount = create_discount_factory(db_session)
        service = DiscountService(db_session)

        disabled = service.update_discount(discount.id, DiscountUpdate(is_active=False))
        assert disabled.status is DiscountStatus.DISABLED

        enabled = service.update_discount(discount.id, DiscountUpdate(is_active=True))
        assert enabled.status is DiscountStatus.ACTIVE


class TestValidateCode:
    def test_should_compute_amounts_for_valid_code(self, db_session):
        create_discount_factory(db_session, code="SAVE20", value="20")

        check = DiscountService(db_session).validate_code(check_request("save20"))

        assert check.is_valid
        assert check.amounts.discount_amount == Decimal("10.00")
        assert check.amounts.final_amount == Decimal("40.00")

    def test_should_reject_unknown_code(self, db_session):
        check = DiscountService(db_session).validate_code(check_request("NOPE"))

        assert not check.is_valid
        assert check.error == "Invalid discount code"

    def test_should_reject_disabled_code(self, db_session):
        create_discount_factory(db_session, code="OFF", is_active=False)

        check = DiscountService(db_session).validate_code(check_request("OFF"))

        assert check.error == "This discount code is no longer active"

    def test_should_reject_code_before_start(self, db_session):
        create_discount_factory(
            db_session, code="SOON", start_date=dt.datetime.utcnow() + dt.timedelta(days=2)
        )

        check = DiscountService(db_session).validate_code(check_request("SOON"))

        assert check.error == "This discount code is not yet active"

    def test_should_reject_expired_code(self, db_session):
        create_discount_factory(
            db_session,
            code="OLD",
            start_date=dt.datetime(2024, 1, 1),
            end_date=dt.datetime(2024, 1, 31),
        )

        check = DiscountService(db_session).validate_code(
            check_request("OLD"), now=dt.datetime(2024, 2, 1)
        )

        assert check.error == "This discount code has expired"

    def test_should_reject_code_at_usage_limit(self, db_session):
        create_discount_factory(db_session, code="ONCE", max_uses=1, current_uses=1)

        check = DiscountService(db_session).validate_code(check_request("ONCE"))

        assert check.error == "This discount code has reached its usage limit"

    def test_should_reject_amount_below_minimum(self, db_session):
        create_discount_factory(db_session, code="BIG", minimum_amount=Decimal("100"))

        check = DiscountService(db_session).validate_code(check_request("BIG"))

        assert check.error.startswith("Minimum purchase amount")

    def test_should_reject_other_item_type(self, db_session):
        create_discount_factory(db_session, code="PKG", applies_to=DiscountAppliesTo.PACKAGES)

        check = DiscountService(db_session).validate_code(check_request("PKG"))

        assert check.error == "This discount code only applies to packages"

    def test_should_let_class_codes_cover_workshops(self, db_session):
        create_discount_factory(db_session, code="CLS", applies_to=DiscountAppliesTo.CLASSES)

        check = DiscountService(db_session).validate_code(
            check_request("CLS", item_type=DiscountItemType.WORKSHOP)
        )

        assert check.is_valid

    def test_should_match_specific_items(self, db_session):
        create_discount_factory(
            db_session,
            code="ONLY",
            applies_to=DiscountAppliesTo.SPECIFIC_ITEMS,
            specific_item_ids=["class-1"],
        )
        service = DiscountService(db_session)

        assert service.validate_code(check_request("ONLY")).is_valid
        assert service.validate_code(check_request("ONLY", item_id="class-2")).error == (
            "This discount code does not apply to the selected item"
        )


class TestApplyCode:
    def test_should_record_usage_and_count_it(self, db_session, test_staff):
        discount = create_discount_factory(
            db_session, code="TENOFF", type=DiscountType.FIXED_AMOUNT, value="10"
        )

        usage = DiscountService(db_session).apply_code(apply_request("TENOFF"), test_staff)

        assert usage.discount_code == "TENOFF"
        assert usage.discount_amount == Decimal("10")
        assert usage.final_amount == Decimal("90")
        assert usage.used_by == test_staff.id
        assert usage.used_by_name == test_staff.full_name
        assert discount.current_uses == 1

    def test_should_mark_used_up_at_limit(self, db_session, test_staff):
        discount = create_discount_factory(db_session, code="ONCE", max_uses=1)
        service = DiscountService(db_session)

        service.apply_code(apply_request("ONCE"), test_staff)

        assert discount.status is DiscountStatus.USED_UP
        with pytest.raises(ValidationError) as exc_info:
            service.apply_code(apply_request("ONCE", member_email="al@example.com"), test_staff)
        assert exc_info.value.details["field"] == "code"

    def test_should_enforce_per_member_limit(self, db_session, test_staff):
        create_discount_factory(db_session, code="MEMBER", max_uses_per_user=1)
        service = DiscountService(db_session)

        service.apply_code(apply_request("MEMBER"), test_staff)
        check = service.validate_code(
            check_request("MEMBER", member_email="JO@example.com")
        )
        other = service.validate_code(check_request("MEMBER", member_email="al@example.com"))

        assert check.error == (
            "You have reached the maximum number of uses for this discount code"
        )
        assert other.is_valid


class TestDeleteAndStats:
    def test_should_delete_unused_code(self, db_session):
        discount = create_discount_factory(db_session)
        discount_id = discount.id

        assert DiscountService(db_session).delete_discount(discount_id) is True
        assert db_session.get(Discount, discount_id) is None

    def test_should_disable_redeemed_code_instead_of_deleting(self, db_session, test_staff):
        discount = create_discount_factory(db_session, code="KEEP")
        service = DiscountService(db_session)
        service.apply_code(apply_request("KEEP"), test_staff)

        assert service.delete_discount(discount.id) is False
        assert discount.status is DiscountStatus.DISABLED
        assert discount.is_active is False

    def test_should_summarize_codes_and_usage(self, db_session, test_staff):
        create_discount_factory(db_session, code="POPULAR", value="10")
        create_discount_factory(db_session, code="OFF", is_active=False)
        create_discount_factory(
            db_session,
            code="GONE",
            start_date=dt.datetime(2020, 1, 1),
            end_date=dt.datetime(2020, 2, 1),
        )
        service = DiscountService(db_session)
        service.apply_code(apply_request("POPULAR"), test_staff)
        service.apply_code(apply_request("POPULAR", member_email="al@example.com"), test_staff)

        stats = service.get_stats()

        assert stats.total_discounts == 3
        assert stats.active_discounts == 1
        assert stats.disabled_discounts == 1
        assert stats.expired_discounts == 1
        assert stats.total_usages == 2
        assert stats.total_discount_amount == Decimal("20")
        assert stats.most_used_discount.code == "POPULAR"
        assert stats.most_used_discount.uses == 2
