from datetime import datetime, timezone
from pydantic import BaseModel

class BaseSchema(BaseModel):
    class Config:
        from_attributes = True

class RequestSchema(BaseModel):
    """Accepts both the mobile client's camelCase keys and snake_case."""

    class Config:
        populate_by_name = True

def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
