"""
Pydantic schemas for membership packages.

Business rules (minimum name length, category and limit requirements) are
checked by ``validate_package_data`` so that all problems are reported
together; the schemas only enforce types and hard bounds.
"""

import enum
import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from gymdesk.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, PACKAGE_NAME_MAX_LENGTH
from gymdesk.core.datetime_utils import UTCDatetime
from gymdesk.memberships.models.package import DurationType, PackageStatus


class MembershipPackageCreate(BaseModel):
    name: str = Field(..., max_length=PACKAGE_NAME_MAX_LENGTH)
    description: str = ""
    duration: int = 1
    duration_type: DurationType = DurationType.MONTHS
    price: Decimal = Decimal("0")

    # Access control
    sport_categories: list[str] = Field(default_factory=list)
    is_full_access: bool = False

    # Usage limits
    is_unlimited: bool = True
    class_limit_per_week: int | None = None
    class_limit_per_month: int | None = None

    # Policies
    allow_freeze: bool = True
    max_freeze_months: int | None = None
    min_freeze_weeks: int | None = None
    guest_passes_included: int = Field(0, ge=0)

    # Renewal and commitment
    auto_renewal: bool = False
    renewal_discount_percent: Decimal | None = None
    early_termination_fee: Decimal | None = Field(None, ge=0)
    minimum_commitment_months: int | None = Field(None, ge=0)

    # Status and display
    status: PackageStatus = PackageStatus.ACTIVE
    is_popular: bool = False
    display_order: int = 1


class MembershipPackageUpdate(BaseModel):
    name: str | None = Field(None, max_length=PACKAGE_NAME_MAX_LENGTH)
    description: str | None = None
    duration: int | None = None
    duration_type: DurationType | None = None
    price: Decimal | None = None
    sport_categories: list[str] | None = None
    is_full_access: bool | None = None
    is_unlimited: bool | None = None
    class_limit_per_week: int | None = None
    class_limit_per_month: int | None = None
    allow_freeze: bool | None = None
    max_freeze_months: int | None = None
    min_freeze_weeks: int | None = None
    guest_passes_included: int | None = Field(None, ge=0)
    auto_renewal: bool | None = None
    renewal_discount_percent: Decimal | None = None
    early_termination_fee: Decimal | None = Field(None, ge=0)
    minimum_commitment_months: int | None = Field(None, ge=0)
    status: PackageStatus | None = None
    is_popular: bool | None = None
    display_order: int | None = None


class MembershipPackageResponse(MembershipPackageCreate):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_by: uuid.UUID | None
    created_by_name: str
    last_modified_by: uuid.UUID | None
    last_modified_by_name: str | None
    created_at: UTCDatetime
    updated_at: UTCDatetime


class PackageSortField(str, enum.Enum):
    NAME = "name"
    PRICE = "price"
    DURATION = "duration"
    CREATED_AT = "created_at"
    DISPLAY_ORDER = "display_order"


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class PackageSearchParams(BaseModel):
    query: str | None = None
    status: list[PackageStatus] = Field(default_factory=list)
    min_price: Decimal | None = Field(None, ge=0)
    max_price: Decimal | None = Field(None, ge=0)
    sport_categories: list[str] = Field(default_factory=list)
    is_popular: bool | None = None
    is_full_access: bool | None = None
    is_unlimited: bool | None = None
    sort: PackageSortField = PackageSortField.DISPLAY_ORDER
    direction: SortDirection = SortDirection.ASC
    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)


class DisplayOrderUpdate(BaseModel):
    package_id: uuid.UUID
    display_order: int


class ClonePackageRequest(BaseModel):
    name: str = Field(..., max_length=PACKAGE_NAME_MAX_LENGTH)


class SportCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    color: str
    display_order: int
    is_active: bool


class UsageStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    package_id: uuid.UUID | None
    total_subscriptions: int
    active_subscriptions: int
    paused_subscriptions: int
    cancelled_subscriptions: int
    total_revenue: Decimal
    average_lifetime_value: Decimal
    churn_rate: Decimal
    average_rating: Decimal | None = None
    conversion_rate: Decimal | None = None
