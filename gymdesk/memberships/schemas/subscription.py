import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from gymdesk.core.datetime_utils import UTCDatetime


class SubscriptionCreate(BaseModel):
    """Either ``member_id`` or both ``member_name`` and ``member_email`` are required.

    With ``member_id`` the name and email are taken from the member record.
    """

    member_id: uuid.UUID | None = None
    member_name: str | None = Field(None, min_length=1, max_length=255)
    member_email: EmailStr | None = None
    start_date: dt.date
    end_date: dt.date | None = None
    amount_paid: Decimal = Field(Decimal("0"), ge=0)
    payment_method: str | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def check_date_order(self) -> "SubscriptionCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    @model_validator(mode="after")
    def check_member(self) -> "SubscriptionCreate":
        if self.member_id is None and not (self.member_name and self.member_email):
            raise ValueError("member_name and member_email are required without member_id")
        return self


class SubscriptionStatusChange(BaseModel):
    reason: str | None = Field(None, max_length=500)


class SubscriptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    package_id: uuid.UUID
    member_id: uuid.UUID | None
    member_name: str
    member_email: str
    start_date: dt.date
    end_date: dt.date | None
    status: str
    amount_paid: Decimal
    payment_method: str | None
    payment_date: UTCDatetime
    classes_attended: int
    guest_passes_used: int
    paused_at: UTCDatetime | None
    pause_reason: str | None
    cancelled_at: UTCDatetime | None
    cancellation_reason: str | None
    notes: str | None
    created_at: UTCDatetime
