from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.clock import Clock, get_clock
from app.core.db import get_db
from app.schemas.presence import (
    PresenceHeartbeatRequest,
    PresenceHeartbeatResponse,
    PresenceStatusRequest,
    PresenceStatusResponse,
)
from app.services import presence

router = APIRouter()


# ------------------------------------------------------------------
# HEARTBEAT
# ------------------------------------------------------------------

@router.post("/heartbeat", response_model=PresenceHeartbeatResponse)
def presence_heartbeat(
    payload: PresenceHeartbeatRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    presence.heartbeat(
        db,
        caller_id=user_id,
        user_id=payload.user_id,
        now=clock.now(),
        status=payload.presence_status,
    )
    return {"success": True}


# ------------------------------------------------------------------
# STATUS
# ------------------------------------------------------------------

@router.post("/status", response_model=PresenceStatusResponse)
def presence_status(
    payload: PresenceStatusRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    status = presence.set_status(db, user_id, payload.status, clock.now())
    return {"success": True, "status": status.value}
