"""
Pydantic schemas for members, their status changes and check-ins.
"""

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from gymdesk.core.datetime_utils import UTCDatetime
from gymdesk.members.models.member import (
    MemberActivityType,
    MembershipType,
    MemberStatus,
    PaymentMethod,
)


class EmergencyContact(BaseModel):
    name: str = Field("", max_length=255)
    relationship: str = Field("", max_length=100)
    phone: str = Field("", max_length=50)


class MemberCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    emergency_contact: EmergencyContact = Field(default_factory=EmergencyContact)
    date_of_birth: dt.date | None = None

    membership_type: MembershipType = MembershipType.RECURRING
    monthly_amount: Decimal | None = Field(None, ge=0)
    total_amount: Decimal | None = Field(None, ge=0)
    total_credits: int | None = Field(None, ge=0)
    payment_method: PaymentMethod | None = None
    auto_renew: bool = False

    waiver_signed: bool = False
    medical_notes: str | None = None
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)


class MemberUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, min_length=1, max_length=50)
    emergency_contact: EmergencyContact | None = None
    date_of_birth: dt.date | None = None
    membership_type: MembershipType | None = None
    monthly_amount: Decimal | None = Field(None, ge=0)
    total_amount: Decimal | None = Field(None, ge=0)
    total_credits: int | None = Field(None, ge=0)
    payment_method: PaymentMethod | None = None
    auto_renew: bool | None = None
    waiver_signed: bool | None = None
    medical_notes: str | None = None
    notes: str | None = None
    tags: list[str] | None = None


class MembershipStatusChange(BaseModel):
    status: MemberStatus
    reason: str | None = Field(None, max_length=500)


class CheckInRequest(BaseModel):
    class_id: uuid.UUID | None = None
    credits_used: int = Field(0, ge=0)
    notes: str | None = Field(None, max_length=500)


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str
    emergency_contact_name: str
    emergency_contact_relationship: str
    emergency_contact_phone: str
    date_of_birth: dt.date | None

    membership_type: MembershipType
    membership_status: MemberStatus
    monthly_amount: Decimal | None
    total_amount: Decimal | None
    total_credits: int | None
    remaining_credits: int | None
    payment_method: PaymentMethod | None
    auto_renew: bool
    membership_started_at: UTCDatetime | None
    paused_at: UTCDatetime | None
    pause_reason: str | None
    overdue_at: UTCDatetime | None

    waiver_signed: bool
    waiver_date: UTCDatetime | None
    medical_notes: str | None

    join_date: UTCDatetime
    last_visit: UTCDatetime | None
    total_visits: int

    current_belt_level_id: uuid.UUID | None
    current_belt_name: str | None
    current_belt_style: str | None
    current_belt_awarded_at: UTCDatetime | None

    notes: str | None
    tags: list[str]
    is_active: bool
    deactivated_at: UTCDatetime | None
    created_at: UTCDatetime
    updated_at: UTCDatetime


class MemberCheckInResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    member_id: uuid.UUID
    member_name: str
    class_id: uuid.UUID | None
    class_title: str | None
    credits_used: int
    check_in_time: UTCDatetime
    notes: str | None
    created_by_name: str


class MemberActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    member_id: uuid.UUID
    type: MemberActivityType
    description: str
    performed_by: uuid.UUID | None
    performed_by_name: str
    created_at: UTCDatetime


class MemberStatsResponse(BaseModel):
    total_members: int
    active_members: int
    paused_members: int
    overdue_members: int
    no_membership_count: int
    new_this_month: int
    recurring_revenue: Decimal
    prepaid_revenue: Decimal
