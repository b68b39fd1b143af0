from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.clock import Clock, get_clock
from app.core.db import get_db
from app.schemas.profile import ProfileConfirmRequest, PublicProfileOut
from app.services import accounts

router = APIRouter()


@router.post("/confirm")
def confirm_profile_image(
    payload: ProfileConfirmRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    accounts.confirm_profile_image(
        db,
        caller_id=user_id,
        user_id=payload.user_id,
        storage_path=payload.storage_path,
        public_url=payload.public_url,
        now=clock.now(),
    )
    return {"success": True}


@router.get("/{target_id}", response_model=PublicProfileOut)
def get_public_profile(
    target_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return accounts.public_profile(db, user_id, target_id)
