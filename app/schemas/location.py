from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.base import BaseSchema, RequestSchema, to_naive_utc


class LocationFixIn(RequestSchema):
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    speed: Optional[float] = None
    heading: Optional[float] = None
    recorded_at: datetime = Field(..., alias="recordedAt")

    @field_validator("recorded_at")
    @classmethod
    def _normalize_recorded_at(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class LocationBatchRequest(RequestSchema):
    user_id: str = Field(..., alias="userId")
    # emptiness is checked by the service so it reports a domain error
    locations: List[LocationFixIn]


class LocationBatchResponse(BaseSchema):
    success: bool = True
    inserted: int


class LocationOut(BaseSchema):
    latitude: float
    longitude: float
    recorded_at: datetime
