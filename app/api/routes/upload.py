from datetime import timezone

from fastapi import APIRouter, Depends

from app.core.auth import get_current_user_id
from app.core.clock import Clock, get_clock
from app.core.errors import Forbidden, InvalidArgument
from app.schemas.enums import ImageContentType
from app.schemas.upload import UploadUrlRequest, UploadUrlResponse
from app.services import storage

router = APIRouter()


def _storage_path(user_id: str, file_name: str, epoch_ms: int) -> str:
    ext = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else "jpg"
    return f"avatars/{user_id}/{epoch_ms}.{ext}"


@router.post("/upload-url", response_model=UploadUrlResponse)
def create_upload_url(
    payload: UploadUrlRequest,
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    if payload.user_id != user_id:
        raise Forbidden()

    if payload.content_type not in {t.value for t in ImageContentType}:
        raise InvalidArgument("Invalid content type")

    epoch_ms = int(clock.now().replace(tzinfo=timezone.utc).timestamp() * 1000)
    signed = storage.create_signed_upload(_storage_path(user_id, payload.file_name, epoch_ms))

    return {
        "upload_url": signed.upload_url,
        "storage_path": signed.storage_path,
        "public_url": signed.public_url,
        "token": signed.token,
    }
