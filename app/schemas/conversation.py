from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.base import BaseSchema, RequestSchema


class ConversationCreateRequest(RequestSchema):
    participant_ids: List[str] = Field(default_factory=list, alias="participantIds")


class MessageSendRequest(RequestSchema):
    body: Optional[str] = None


class ConversationOut(BaseSchema):
    id: int
    is_terminated: bool
    created_at: Optional[datetime]


class MessageOut(BaseSchema):
    id: int
    sender_id: str
    body: str
    created_at: Optional[datetime]
