from gymdesk.memberships.models.package import DurationType, MembershipPackage, PackageStatus
from gymdesk.memberships.models.subscription import MembershipSubscription, SubscriptionStatus

__all__ = [
    "DurationType",
    "MembershipPackage",
    "PackageStatus",
    "MembershipSubscription",
    "SubscriptionStatus",
]
