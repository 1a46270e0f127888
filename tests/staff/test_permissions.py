"""
Tests for role capabilities.
"""

import pytest

from gymdesk.staff.models.staff import StaffRole
from gymdesk.staff.permissions import Capability, capabilities_for, has_capability


class TestHasCapability:
    @pytest.mark.parametrize("capability", list(Capability))
    def test_admin_holds_every_capability(self, capability):
        assert has_capability(StaffRole.ADMIN, capability)

    @pytest.mark.parametrize("role", [StaffRole.TRAINER, StaffRole.STAFF])
    @pytest.mark.parametrize(
        "capability",
        [
            Capability.VIEW_DASHBOARD,
            Capability.VIEW_MY_SCHEDULE,
            Capability.VIEW_PACKAGES,
            Capability.APPLY_DISCOUNTS,
        ],
    )
    def test_front_desk_roles_hold_front_desk_capabilities(self, role, capability):
        assert has_capability(role, capability)

    @pytest.mark.parametrize("role", [StaffRole.TRAINER, StaffRole.STAFF])
    @pytest.mark.parametrize(
        "capability",
        [
            Capability.MANAGE_PACKAGES,
            Capability.CREATE_CLASSES,
            Capability.EDIT_CLASSES,
            Capability.DELETE_CLASSES,
            Capability.CREATE_DISCOUNTS,
            Capability.MANAGE_STAFF,
        ],
    )
    def test_front_desk_roles_lack_admin_capabilities(self, role, capability):
        assert not has_capability(role, capability)

    def test_should_accept_plain_strings(self):
        assert has_capability("admin", "manage_staff")
        assert not has_capability("staff", "manage_staff")

    @pytest.mark.parametrize("role", ["owner", "", None, "ADMIN"])
    def test_unknown_role_holds_nothing(self, role):
        assert not has_capability(role, Capability.VIEW_DASHBOARD)
        assert capabilities_for(role) == frozenset()

    def test_unknown_capability_is_never_granted(self):
        assert not has_capability(StaffRole.ADMIN, "launch_rockets")

    @pytest.mark.parametrize("role", [StaffRole.TRAINER, StaffRole.STAFF])
    @pytest.mark.parametrize("capability", [Capability.VIEW_MEMBERS, Capability.MANAGE_MEMBERS])
    def test_member_records_are_admin_only(self, role, capability):
        assert not has_capability(role, capability)
        assert has_capability(StaffRole.ADMIN, capability)
