"""
Thin wrappers over the Supabase admin client: profile-image storage and the
identity service's admin API.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from app.core.config import PROFILE_BUCKET
from app.core.errors import ServerError
from app.services.supabase_admin import supabase_admin


@dataclass(frozen=True)
class SignedUpload:
    upload_url: str
    storage_path: str
    public_url: str
    token: Optional[str]


@dataclass(frozen=True)
class IdentityRecord:
    id: str
    email: str
    name: Optional[str]
    created_at: Optional[str] = None


def create_signed_upload(storage_path: str) -> SignedUpload:
    bucket = supabase_admin().storage.from_(PROFILE_BUCKET)

    try:
        data = bucket.create_signed_upload_url(storage_path)
        public_url = bucket.get_public_url(storage_path)
    except Exception as e:
        logger.error(f"Error creating signed URL | path={storage_path} err={e}")
        raise ServerError("Failed to create upload URL")

    return SignedUpload(
        upload_url=data.get("signed_url") or data.get("signedUrl"),
        storage_path=storage_path,
        public_url=public_url,
        token=data.get("token"),
    )


def remove_profile_image(storage_path: str) -> bool:
    """Best effort: failures are logged, never raised."""
    try:
        supabase_admin().storage.from_(PROFILE_BUCKET).remove([storage_path])
    except Exception as e:
        logger.error(f"Error deleting profile image | path={storage_path} err={e}")
        return False
    return True


def fetch_identity(user_id: str) -> IdentityRecord | None:
    try:
        resp = supabase_admin().auth.admin.get_user_by_id(user_id)
    except Exception as e:
        logger.error(f"Auth user lookup failed | user={user_id} err={e}")
        return None

    user = getattr(resp, "user", None)
    if user is None or not user.email:
        return None

    metadata = user.user_metadata or {}
    return IdentityRecord(
        id=str(user.id),
        email=user.email,
        name=metadata.get("name"),
        created_at=str(user.created_at) if user.created_at else None,
    )


def delete_identity(user_id: str) -> bool:
    """Best effort: failures are logged, never raised."""
    try:
        supabase_admin().auth.admin.delete_user(user_id)
    except Exception as e:
        logger.error(f"Error deleting auth user | user={user_id} err={e}")
        return False
    return True
