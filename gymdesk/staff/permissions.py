"""Role capabilities.

Every role-gated operation names a ``Capability``; whether a role holds it
is decided here and nowhere else.
"""

import enum

from gymdesk.staff.models.staff import StaffRole


class Capability(str, enum.Enum):
    VIEW_DASHBOARD = "view_dashboard"
    VIEW_MY_SCHEDULE = "view_my_schedule"
    VIEW_PACKAGES = "view_packages"
    VIEW_MEMBERS = "view_members"
    MANAGE_MEMBERS = "manage_members"
    MANAGE_PACKAGES = "manage_packages"
    CREATE_CLASSES = "create_classes"
    EDIT_CLASSES = "edit_classes"
    DELETE_CLASSES = "delete_classes"
    CREATE_DISCOUNTS = "create_discounts"
    APPLY_DISCOUNTS = "apply_discounts"
    MANAGE_STAFF = "manage_staff"


_FRONT_DESK: frozenset[Capability] = frozenset(
    {
        Capability.VIEW_DASHBOARD,
        Capability.VIEW_MY_SCHEDULE,
        Capability.VIEW_PACKAGES,
        Capability.APPLY_DISCOUNTS,
    }
)

ROLE_CAPABILITIES: dict[StaffRole, frozenset[Capability]] = {
    StaffRole.ADMIN: frozenset(Capability),
    StaffRole.TRAINER: _FRONT_DESK,
    StaffRole.STAFF: _FRONT_DESK,
}


def _parse_role(role: StaffRole | str | None) -> StaffRole | None:
    if isinstance(role, StaffRole):
        return role
    if role is None:
        return None
    try:
        return StaffRole(role)
    except ValueError:
        return None


def capabilities_for(role: StaffRole | str | None) -> frozenset[Capability]:
    """All capabilities of a role; empty for unknown roles."""
    parsed = _parse_role(role)
    if parsed is None:
        return frozenset()
    return ROLE_CAPABILITIES[parsed]


def has_capability(role: StaffRole | str | None, capability: Capability | str) -> bool:
    """Return True if ``role`` holds ``capability``.

    Unknown roles and unknown capability names are never granted anything.
    """
    try:
        wanted = Capability(capability)
    except ValueError:
        return False
    return wanted in capabilities_for(role)
