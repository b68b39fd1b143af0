from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.clock import Clock, get_clock
from app.core.db import get_db
from app.core.errors import InvalidArgument
from app.schemas.profile import (
    AccountDeleteRequest,
    AccountProfileOut,
    ProfileUpdateRequest,
)
from app.services import accounts
from app.services.accounts import ProfileUpdate

router = APIRouter()


# ----------------------------
# PROFILE
# ----------------------------
@router.get("/profile", response_model=AccountProfileOut)
def get_profile(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    return accounts.get_or_create_profile(db, user_id, clock.now())


@router.patch("/profile")
def update_profile(
    payload: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    update = ProfileUpdate.from_fields(
        {name: getattr(payload, name) for name in payload.model_fields_set}
    )
    accounts.update_profile(db, user_id, update, clock.now())
    return {"success": True}


# ----------------------------
# DELETE
# ----------------------------
@router.post("/delete")
def delete_account(
    payload: AccountDeleteRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    if not payload.confirmation:
        raise InvalidArgument("Confirmation required")

    accounts.delete_account(db, user_id)
    logger.info(f"Account deletion complete | user={user_id}")
    return {"success": True, "message": "Account deleted successfully"}
