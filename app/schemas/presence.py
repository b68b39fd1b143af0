from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, List

from app.schemas.base import RequestSchema

class PresenceHeartbeatRequest(RequestSchema):
    user_id: str = Field(..., alias="userId")
    # plain str: the service reports unknown values as InvalidArgument
    presence_status: Optional[str] = Field(None, alias="presenceStatus")

class PresenceHeartbeatResponse(BaseModel):
    success: bool = True

class PresenceStatusRequest(RequestSchema):
    status: Optional[str] = None

class PresenceStatusResponse(BaseModel):
    success: bool = True
    status: str

class NearbyUserOut(BaseModel):
    id: str
    name: str
    profile_image_url: Optional[str]
    distance_km: float

class NearbyResponse(BaseModel):
    users: List[NearbyUserOut]

class CleanupUsersResponse(BaseModel):
    success: bool = True
    demoted: int
    user_ids: List[str]
    timestamp: datetime
