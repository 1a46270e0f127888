"""
Tests for the package creation wizard.
"""

from decimal import Decimal

import pytest

from gymdesk.core.exceptions import ValidationError
from gymdesk.memberships.schemas.package import MembershipPackageCreate
from gymdesk.memberships.services.package_service import validate_package_data
from gymdesk.memberships.wizard import (
    DEFAULT_VALUES,
    WizardStep,
    advance,
    go_back,
    new_wizard,
    to_package_create,
    update_fields,
)


def reviewed_state(**fields):
    state = new_wizard(name="Monthly BJJ", price=Decimal("99"), **fields)
    state = advance(state)
    state = update_fields(state, sport_categories=["bjj"])
    return advance(advance(state))


class TestWizardNavigation:
    def test_should_start_on_basic_info_with_defaults(self):
        state = new_wizard()

        assert state.step is WizardStep.BASIC_INFO
        assert state.step.label == "Basic Info"
        assert state.values == DEFAULT_VALUES
        assert state.errors == ()

    def test_should_not_advance_with_missing_name(self):
        state = advance(new_wizard())

        assert state.step is WizardStep.BASIC_INFO
        assert "Package name is required" in state.errors

    def test_should_not_advance_without_access(self):
        state = advance(new_wizard(name="Monthly BJJ"))
        assert state.step is WizardStep.ACCESS_AND_LIMITS

        blocked = advance(state)

        assert blocked.step is WizardStep.ACCESS_AND_LIMITS
        assert blocked.errors == (
            "Must select at least one sport category or enable full access",
        )

    def test_should_reach_review_through_every_step(self):
        state = reviewed_state()

        assert state.step is WizardStep.REVIEW
        assert state.is_review
        assert advance(state).step is WizardStep.REVIEW

    def test_should_go_back_and_stop_at_first_step(self):
        state = reviewed_state()

        assert go_back(state).step is WizardStep.POLICIES
        assert go_back(new_wizard()).step is WizardStep.BASIC_INFO

    def test_should_leave_previous_state_untouched(self):
        first = new_wizard(name="Monthly BJJ")

        second = update_fields(first, name="Weekly BJJ")
        advanced = advance(second)

        assert first.values["name"] == "Monthly BJJ"
        assert second.step is WizardStep.BASIC_INFO
        assert advanced.step is WizardStep.ACCESS_AND_LIMITS


class TestUpdateFields:
    def test_should_select_full_access_when_all_category_picked(self):
        state = update_fields(new_wizard(), sport_categories=["bjj", "all"])

        assert state.values["is_full_access"] is True
        assert state.values["sport_categories"] == ("all",)

    def test_should_replace_categories_when_enabling_full_access(self):
        state = update_fields(new_wizard(), sport_categories=["bjj", "boxing"])

        state = update_fields(state, is_full_access=True)

        assert state.values["sport_categories"] == ("all",)

    def test_should_clear_class_limits_when_switching_to_unlimited(self):
        state = update_fields(new_wizard(), is_unlimited=False, class_limit_per_week=3)

        state = update_fields(state, is_unlimited=True)

        assert state.values["class_limit_per_week"] is None
        assert state.values["class_limit_per_month"] is None

    def test_should_clear_errors(self):
        state = advance(new_wizard())
        assert state.errors

        assert update_fields(state, name="Monthly BJJ").errors == ()

    def test_should_reject_unknown_field(self):
        with pytest.raises(ValidationError):
            update_fields(new_wizard(), colour="red")


class TestToPackageCreate:
    def test_should_build_payload_on_review(self):
        data = to_package_create(reviewed_state())

        assert data.name == "Monthly BJJ"
        assert data.price == Decimal("99")
        assert data.sport_categories == ["bjj"]
        assert data.max_freeze_months == 2

    def test_should_refuse_before_review(self):
        with pytest.raises(ValidationError) as exc_info:
            to_package_create(new_wizard(name="Monthly BJJ"))

        assert exc_info.value.details["field"] == "step"

    def test_should_apply_full_package_rules(self):
        state = reviewed_state()
        state = update_fields(state, renewal_discount_percent=Decimal("150"))

        with pytest.raises(ValidationError) as exc_info:
            to_package_create(state)

        assert exc_info.value.details["errors"] == [
            "Renewal discount must be between 0 and 100 percent"
        ]


class TestStepRules:
    def test_should_reject_short_name_on_basic_info(self):
        state = advance(new_wizard(name="BJ"))

        assert state.step is WizardStep.BASIC_INFO
        assert state.errors == ("Package name must be at least 3 characters long",)

    def test_should_require_class_limit_for_limited_package_on_access_step(self):
        state = advance(new_wizard(name="Monthly BJJ", is_unlimited=False))
        state = update_fields(state, sport_categories=["bjj"])

        blocked = advance(state)

        assert blocked.step is WizardStep.ACCESS_AND_LIMITS
        assert blocked.errors == (
            "Must specify either weekly or monthly class limit for limited packages",
        )
        assert advance(update_fields(blocked, class_limit_per_week=2)).step is (
            WizardStep.POLICIES
        )

    def test_should_check_policies_before_review(self):
        state = advance(advance(new_wizard(name="Monthly BJJ", is_full_access=True)))
        assert state.step is WizardStep.POLICIES

        blocked = advance(update_fields(state, renewal_discount_percent=Decimal("150")))

        assert blocked.step is WizardStep.POLICIES
        assert blocked.errors == ("Renewal discount must be between 0 and 100 percent",)

    def test_review_should_report_the_same_errors_as_package_validation(self):
        state = update_fields(
            reviewed_state(),
            name="",
            is_unlimited=False,
            min_freeze_weeks=0,
        )
        values = dict(state.values)
        values["sport_categories"] = list(values["sport_categories"])

        assert list(advance(state).errors) == validate_package_data(
            MembershipPackageCreate(**values)
        )
        assert len(advance(state).errors) == 3
