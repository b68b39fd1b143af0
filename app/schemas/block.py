from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.base import BaseSchema, RequestSchema


class BlockCreateRequest(RequestSchema):
    blocked_user_id: Optional[str] = Field(None, alias="blockedUserId")


class BlockOut(BaseSchema):
    blocked_id: str
    created_at: datetime
