from gymdesk.discounts.models.discount import (
    Discount,
    DiscountAppliesTo,
    DiscountStatus,
    DiscountType,
)
from gymdesk.discounts.models.usage import DiscountItemType, DiscountUsage

__all__ = [
    "Discount",
    "DiscountAppliesTo",
    "DiscountStatus",
    "DiscountType",
    "DiscountItemType",
    "DiscountUsage",
]
