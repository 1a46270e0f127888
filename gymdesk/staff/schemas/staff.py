import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from gymdesk.core.datetime_utils import UTCDatetime
from gymdesk.staff.models.staff import StaffRole
from gymdesk.staff.permissions import Capability


class StaffCreate(BaseModel):
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    role: StaffRole = StaffRole.STAFF


class StaffUpdate(BaseModel):
    full_name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    role: StaffRole | None = None
    is_active: bool | None = None


class StaffResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    full_name: str
    phone: str | None
    role: StaffRole
    is_active: bool
    created_at: UTCDatetime


class CurrentStaffResponse(StaffResponse):
    """Staff profile plus the capabilities its role grants."""

    capabilities: list[Capability]


class InstructorResponse(BaseModel):
    id: uuid.UUID
    name: str
