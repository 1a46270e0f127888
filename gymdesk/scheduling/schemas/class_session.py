"""
Pydantic schemas for classes, workshops and class packages.
"""

import uuid
import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from gymdesk.core.constants import MAX_RECURRENCE_DURATION
from gymdesk.core.datetime_utils import UTCDatetime
from gymdesk.scheduling.models.class_session import ClassType
from gymdesk.scheduling.recurrence import DurationUnit, RecurrencePattern, ScheduleType


class RecurrenceInput(BaseModel):
    """Recurrence as submitted by the class form (weekdays: 0 = Sunday)."""

    start_date: dt.date
    duration_value: int = Field(
        4, le=MAX_RECURRENCE_DURATION, description="Number of weeks or months"
    )
    duration_unit: DurationUnit = DurationUnit.WEEKS
    weekdays: list[int] = Field(default_factory=list)
    schedule_type: ScheduleType = ScheduleType.RECURRING

    def to_pattern(self) -> RecurrencePattern:
        """Build the domain pattern; raises InvalidPatternError when malformed."""
        return RecurrencePattern(
            start_date=self.start_date,
            duration_value=self.duration_value,
            duration_unit=self.duration_unit,
            weekdays=frozenset(self.weekdays),
            schedule_type=self.schedule_type,
        )


class SchedulePreviewRequest(RecurrenceInput):
    total_price: Decimal | None = Field(None, ge=0)


class SchedulePreviewResponse(BaseModel):
    dates: list[dt.date]
    session_count: int
    end_date: dt.date
    per_session_price: Decimal | None = None


class _TimeSlot(BaseModel):
    start_time: dt.time
    end_time: dt.time

    @model_validator(mode="after")
    def check_time_order(self) -> "_TimeSlot":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ClassCreate(_TimeSlot):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    type: ClassType = ClassType.CLASS
    date: dt.date
    location: str = Field(..., min_length=1)
    capacity: int = Field(10, gt=0)
    instructor_id: uuid.UUID
    price: Decimal = Field(Decimal("0"), ge=0)
    image_url: str | None = None
    is_active: bool = True
    # Recurring: one standalone class per generated date, starting at `date`
    schedule_type: ScheduleType = ScheduleType.SINGLE
    weekdays: list[int] = Field(default_factory=list)
    duration_value: int = Field(4, le=MAX_RECURRENCE_DURATION)
    duration_unit: DurationUnit = DurationUnit.WEEKS

    def to_pattern(self) -> RecurrencePattern:
        return RecurrencePattern(
            start_date=self.date,
            duration_value=self.duration_value,
            duration_unit=self.duration_unit,
            weekdays=frozenset(self.weekdays),
            schedule_type=self.schedule_type,
        )


class ClassUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    type: ClassType | None = None
    date: dt.date | None = None
    start_time: dt.time | None = None
    end_time: dt.time | None = None
    location: str | None = Field(None, min_length=1)
    capacity: int | None = Field(None, gt=0)
    instructor_id: uuid.UUID | None = None
    price: Decimal | None = Field(None, ge=0)
    image_url: str | None = None
    is_active: bool | None = None


class ClassResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str
    type: ClassType
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    location: str
    capacity: int
    current_enrollment: int
    instructor_id: uuid.UUID | None
    instructor_name: str
    price: Decimal
    image_url: str | None
    is_active: bool
    is_package: bool
    package_id: uuid.UUID | None
    package_price: Decimal | None
    total_sessions: int | None
    session_number: int | None
    package_title: str | None
    created_at: UTCDatetime
    updated_at: UTCDatetime


class ClassPackageCreate(_TimeSlot):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    type: ClassType = ClassType.CLASS
    location: str = Field(..., min_length=1)
    capacity: int = Field(10, gt=0)
    instructor_id: uuid.UUID
    package_price: Decimal = Field(..., ge=0)
    image_url: str | None = None
    is_active: bool = True
    recurrence: RecurrenceInput


class ClassPackageUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    location: str | None = Field(None, min_length=1)
    capacity: int | None = Field(None, gt=0)
    package_price: Decimal | None = Field(None, ge=0)
    image_url: str | None = None
    is_active: bool | None = None


class PackageSessionCreate(BaseModel):
    """Extra session appended to an existing package; unset fields inherit."""

    date: dt.date
    start_time: dt.time | None = None
    end_time: dt.time | None = None
    location: str | None = None


class ClassPackageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str
    type: ClassType
    start_time: dt.time
    end_time: dt.time
    location: str
    capacity: int
    instructor_id: uuid.UUID | None
    instructor_name: str
    package_price: Decimal
    total_sessions: int
    per_session_price: Decimal = Decimal("0")
    days_of_week: list[int]
    duration_value: int
    duration_unit: str
    start_date: dt.date
    end_date: dt.date
    image_url: str | None
    is_active: bool
    created_at: UTCDatetime
    sessions: list[ClassResponse] = Field(default_factory=list)


class ClassPackageCreatedResponse(BaseModel):
    package_id: uuid.UUID
    total_classes: int
    per_session_price: Decimal
