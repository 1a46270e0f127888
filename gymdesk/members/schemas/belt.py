import uuid

from pydantic import BaseModel, ConfigDict, Field

from gymdesk.core.datetime_utils import UTCDatetime


class BeltLevelCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    style: str = Field(..., min_length=1, max_length=100)
    sort_order: int = 0
    color: str | None = Field(None, max_length=20)


class BeltLevelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    style: str
    sort_order: int
    color: str | None


class BeltAwardCreate(BaseModel):
    belt_level_id: uuid.UUID
    notes: str | None = Field(None, max_length=500)


class BeltAwardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    member_id: uuid.UUID
    belt_level_id: uuid.UUID | None
    belt_level_name: str
    style: str
    awarded_at: UTCDatetime
    awarded_by_name: str
    notes: str | None
