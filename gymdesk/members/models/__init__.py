from gymdesk.members.models.belt import BeltLevel, MemberBeltAward
from gymdesk.members.models.member import (
    Member,
    MemberActivity,
    MemberActivityType,
    MemberCheckIn,
    MembershipType,
    MemberStatus,
    PaymentMethod,
)

__all__ = [
    "BeltLevel",
    "MemberBeltAward",
    "Member",
    "MemberActivity",
    "MemberActivityType",
    "MemberCheckIn",
    "MembershipType",
    "MemberStatus",
    "PaymentMethod",
]
