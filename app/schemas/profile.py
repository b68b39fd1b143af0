from datetime import datetime
from typing import Optional
from pydantic import Field

from app.schemas.base import BaseSchema, RequestSchema
from app.schemas.enums import Gender, PresenceStatus

class ProfileUpdateRequest(RequestSchema):
    """Every field optional; which ones were sent is read from ``model_fields_set``."""

    name: Optional[str] = None
    bio: Optional[str] = None
    age: Optional[int] = None
    location: Optional[str] = None
    gender: Optional[str] = None

class AccountDeleteRequest(RequestSchema):
    confirmation: bool = False

class ProfileConfirmRequest(RequestSchema):
    user_id: str = Field(..., alias="userId")
    storage_path: str = Field(..., alias="storagePath")
    public_url: str = Field(..., alias="publicUrl")

class AccountProfileOut(BaseSchema):
    id: str
    email: str
    name: Optional[str]
    profile_image_url: Optional[str]
    presence_status: PresenceStatus
    last_active_at: Optional[datetime]
    bio: Optional[str]
    age: Optional[int]
    location: Optional[str]
    gender: Optional[Gender]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

class PublicProfileOut(BaseSchema):
    id: str
    name: Optional[str]
    profile_image_url: Optional[str]
    presence_status: PresenceStatus
    last_active_at: Optional[datetime]
