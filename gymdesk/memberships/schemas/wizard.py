"""
Pydantic schemas for the package creation wizard endpoints.

The server keeps no wizard state: the client sends the current step and the
values collected so far, and gets back the resulting state.
"""

from pydantic import BaseModel, Field

from gymdesk.memberships.schemas.package import MembershipPackageCreate, MembershipPackageUpdate
from gymdesk.memberships.wizard import PackageWizardState, WizardStep


class WizardStateRequest(BaseModel):
    step: WizardStep = WizardStep.BASIC_INFO
    values: MembershipPackageUpdate = Field(default_factory=MembershipPackageUpdate)

    def collected_values(self) -> dict:
        return self.values.model_dump(exclude_none=True)


class WizardStateResponse(BaseModel):
    step: WizardStep
    step_label: str
    is_review: bool
    errors: list[str]
    values: MembershipPackageCreate

    @classmethod
    def from_state(cls, state: PackageWizardState) -> "WizardStateResponse":
        return cls(
            step=state.step,
            step_label=state.step.label,
            is_review=state.is_review,
            errors=list(state.errors),
            values=MembershipPackageCreate(**state.values),
        )
