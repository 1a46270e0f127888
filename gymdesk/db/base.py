"""
Database base module - imports all models for Alembic migration detection.

Importing this module registers every model with ``Base.metadata``; the
imports look unused but Alembic autogenerate and ``create_all`` rely on them.
"""

from gymdesk.db.session import Base
from gymdesk.discounts.models.discount import Discount
from gymdesk.discounts.models.usage import DiscountUsage
from gymdesk.members.models.belt import BeltLevel, MemberBeltAward
from gymdesk.members.models.member import Member, MemberActivity, MemberCheckIn
from gymdesk.memberships.models.package import MembershipPackage
from gymdesk.memberships.models.subscription import MembershipSubscription
from gymdesk.scheduling.models.class_session import ClassPackage, ClassSession
from gymdesk.staff.models.staff import Staff

# Export all models for Alembic
__all__ = [
    "Base",
    "Staff",
    "MembershipPackage",
    "MembershipSubscription",
    "Member",
    "MemberActivity",
    "MemberCheckIn",
    "BeltLevel",
    "MemberBeltAward",
    "ClassPackage",
    "ClassSession",
    "Discount",
    "DiscountUsage",
]
