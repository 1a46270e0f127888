"""Step-by-step membership package creation.

The wizard state is immutable: every operation returns a new
``PackageWizardState`` and leaves its input untouched, so a client can keep
the history of states or discard one without side effects.

Example:
    state = new_wizard()
    state = update_fields(state, name="Monthly BJJ", price=Decimal("99"))
    state = advance(state)            # Basic Info -> Access & Limits
    state = update_fields(state, sport_categories=["bjj"])
    state = advance(advance(state))   # -> Policies -> Review
    package = to_package_create(state)
"""

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal
from types import MappingProxyType
from typing import Any

from gymdesk.core.exceptions import ValidationError
from gymdesk.memberships.models.package import DurationType, PackageStatus
from gymdesk.memberships.schemas.package import MembershipPackageCreate
from gymdesk.memberships.services.package_service import (
    access_errors,
    basic_info_errors,
    policy_errors,
    validate_package_data,
)
from gymdesk.memberships.sport_categories import FULL_ACCESS_CATEGORY


class WizardStep(enum.IntEnum):
    BASIC_INFO = 0
    ACCESS_AND_LIMITS = 1
    POLICIES = 2
    REVIEW = 3

    @property
    def label(self) -> str:
        return _STEP_LABELS[self]


_STEP_LABELS = {
    WizardStep.BASIC_INFO: "Basic Info",
    WizardStep.ACCESS_AND_LIMITS: "Access & Limits",
    WizardStep.POLICIES: "Policies",
    WizardStep.REVIEW: "Review",
}

DEFAULT_VALUES: Mapping[str, Any] = MappingProxyType(
    {
        "name": "",
        "description": "",
        "duration": 1,
        "duration_type": DurationType.MONTHS,
        "price": Decimal("0"),
        "sport_categories": (),
        "is_full_access": False,
        "is_unlimited": True,
        "class_limit_per_week": None,
        "class_limit_per_month": None,
        "allow_freeze": True,
        "max_freeze_months": 2,
        "min_freeze_weeks": 1,
        "guest_passes_included": 0,
        "auto_renewal": False,
        "renewal_discount_percent": None,
        "early_termination_fee": None,
        "minimum_commitment_months": None,
        "status": PackageStatus.ACTIVE,
        "is_popular": False,
        "display_order": 1,
    }
)


@dataclass(frozen=True)
class PackageWizardState:
    step: WizardStep = WizardStep.BASIC_INFO
    values: Mapping[str, Any] = field(default_factory=lambda: DEFAULT_VALUES)
    errors: tuple[str, ...] = ()

    @property
    def is_review(self) -> bool:
        return self.step is WizardStep.REVIEW


def new_wizard(**initial: Any) -> PackageWizardState:
    """Fresh wizard on the first step, optionally prefilled (e.g. for editing)."""
    state = PackageWizardState()
    return update_fields(state, **initial) if initial else state


def resume_wizard(step: WizardStep, **values: Any) -> PackageWizardState:
    """Rebuild a state a client kept between requests."""
    return replace(new_wizard(**values), step=WizardStep(step))


def _review_errors(values: Mapping[str, Any]) -> list[str]:
    return basic_info_errors(values) + access_errors(values) + policy_errors(values)


_STEP_VALIDATORS: dict[WizardStep, Callable[[Mapping[str, Any]], list[str]]] = {
    WizardStep.BASIC_INFO: basic_info_errors,
    WizardStep.ACCESS_AND_LIMITS: access_errors,
    WizardStep.POLICIES: policy_errors,
    WizardStep.REVIEW: _review_errors,
}


def step_errors(state: PackageWizardState) -> list[str]:
    return _STEP_VALIDATORS[state.step](state.values)


def update_fields(state: PackageWizardState, **changes: Any) -> PackageWizardState:
    """Return a state with ``changes`` applied and errors cleared.

    Related fields follow each other: enabling full access or picking the
    ``all`` category selects both, and switching to unlimited clears the
    class limits.
    """
    unknown = set(changes) - set(DEFAULT_VALUES)
    if unknown:
        raise ValidationError(f"Unknown package fields: {sorted(unknown)}")

    values = dict(state.values)
    values.update(changes)

    if "sport_categories" in changes:
        values["sport_categories"] = tuple(changes["sport_categories"])
        if FULL_ACCESS_CATEGORY in values["sport_categories"]:
            values["is_full_access"] = True
    if values["is_full_access"] and ("is_full_access" in changes or "sport_categories" in changes):
        values["sport_categories"] = (FULL_ACCESS_CATEGORY,)
    if changes.get("is_unlimited") is True:
        values["class_limit_per_week"] = None
        values["class_limit_per_month"] = None

    return replace(state, values=MappingProxyType(values), errors=())


def advance(state: PackageWizardState) -> PackageWizardState:
    """Move to the next step if the current one is complete.

    On failure the step stays and ``errors`` lists what is missing. Review is
    the last step; advancing from it only re-validates.
    """
    errors = step_errors(state)
    if errors:
        return replace(state, errors=tuple(errors))
    if state.is_review:
        return replace(state, errors=())
    return replace(state, step=WizardStep(state.step + 1), errors=())


def go_back(state: PackageWizardState) -> PackageWizardState:
    previous = max(state.step - 1, WizardStep.BASIC_INFO)
    return replace(state, step=WizardStep(previous), errors=())


def to_package_create(state: PackageWizardState) -> MembershipPackageCreate:
    """Build the create payload from a completed wizard.

    Raises:
        ValidationError: The wizard is not on the Review step, or the
            collected values break a package rule.
    """
    if not state.is_review:
        raise ValidationError(
            f"Package can only be built on the Review step, not {state.step.label}",
            field="step",
        )
    values = dict(state.values)
    values["sport_categories"] = list(values["sport_categories"])
    data = MembershipPackageCreate(**values)

    errors = validate_package_data(data)
    if errors:
        raise ValidationError("Invalid membership package", errors=errors)
    return data
