"""
Pydantic schemas for discount codes and their usage.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from gymdesk.core.datetime_utils import UTCDatetime
from gymdesk.discounts.models.discount import DiscountAppliesTo, DiscountStatus, DiscountType
from gymdesk.discounts.models.usage import DiscountItemType


class DiscountCreate(BaseModel):
    code: str = Field(..., max_length=50)
    name: str = Field(..., max_length=200)
    description: str | None = None
    type: DiscountType
    value: Decimal
    max_uses: int | None = None
    max_uses_per_user: int | None = None
    start_date: datetime
    end_date: datetime | None = None
    applies_to: DiscountAppliesTo = DiscountAppliesTo.ALL
    specific_item_ids: list[str] = Field(default_factory=list)
    minimum_amount: Decimal | None = Field(None, ge=0)
    is_active: bool = True


class DiscountUpdate(BaseModel):
    code: str | None = Field(None, max_length=50)
    name: str | None = Field(None, max_length=200)
    description: str | None = None
    type: DiscountType | None = None
    value: Decimal | None = None
    max_uses: int | None = None
    max_uses_per_user: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    applies_to: DiscountAppliesTo | None = None
    specific_item_ids: list[str] | None = None
    minimum_amount: Decimal | None = Field(None, ge=0)
    is_active: bool | None = None


class DiscountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    code: str
    name: str
    description: str | None
    type: DiscountType
    value: Decimal
    display: str = ""
    max_uses: int | None
    max_uses_per_user: int | None
    current_uses: int
    start_date: UTCDatetime
    end_date: UTCDatetime | None
    applies_to: DiscountAppliesTo
    specific_item_ids: list[str]
    minimum_amount: Decimal | None
    status: DiscountStatus
    is_active: bool
    created_by: uuid.UUID | None
    created_by_name: str
    created_at: UTCDatetime
    updated_at: UTCDatetime


class DiscountCheckRequest(BaseModel):
    """A prospective sale a code is checked against."""

    code: str = Field(..., min_length=1, max_length=50)
    item_type: DiscountItemType
    item_id: str
    amount: Decimal = Field(..., ge=0)
    member_email: EmailStr | None = None


class DiscountApplyRequest(DiscountCheckRequest):
    item_name: str = ""
    member_name: str | None = None
    notes: str | None = None


class DiscountValidationResponse(BaseModel):
    is_valid: bool
    error: str | None = None
    discount_id: uuid.UUID | None = None
    code: str | None = None
    display: str | None = None
    original_amount: Decimal
    discount_amount: Decimal = Decimal("0")
    final_amount: Decimal
    savings_percentage: int = 0


class DiscountUsageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    discount_id: uuid.UUID
    discount_code: str
    member_email: str | None
    member_name: str | None
    item_type: DiscountItemType
    item_id: str
    item_name: str
    original_amount: Decimal
    discount_amount: Decimal
    final_amount: Decimal
    used_by: uuid.UUID | None
    used_by_name: str
    notes: str | None
    used_at: UTCDatetime


class MostUsedDiscount(BaseModel):
    code: str
    name: str
    uses: int


class DiscountStatsResponse(BaseModel):
    total_discounts: int
    active_discounts: int
    expired_discounts: int
    disabled_discounts: int
    used_up_discounts: int
    total_usages: int
    total_discount_amount: Decimal
    most_used_discount: MostUsedDiscount | None = None
