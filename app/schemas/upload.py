from typing import Optional
from pydantic import BaseModel, Field

from app.schemas.base import RequestSchema

class UploadUrlRequest(RequestSchema):
    user_id: str = Field(..., alias="userId")
    file_name: str = Field(..., alias="fileName")
    content_type: str = Field(..., alias="contentType")

class UploadUrlResponse(BaseModel):
    upload_url: str
    storage_path: str
    public_url: str
    token: Optional[str] = None
