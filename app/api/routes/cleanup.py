from typing import Optional

from fastapi import APIRouter, Body, Depends, Header
from sqlalchemy.orm import Session

from app.core.clock import Clock, get_clock
from app.core.db import get_db
from app.schemas.presence import CleanupUsersResponse
from app.services import cleanup, presence

router = APIRouter()


# Called by an external scheduler; no credential.
@router.post("/inactive-users", response_model=CleanupUsersResponse)
def cleanup_inactive_users(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    now = clock.now()
    demoted = presence.demote_stale(db, now)
    return {
        "success": True,
        "demoted": len(demoted),
        "user_ids": demoted,
        "timestamp": now,
    }


@router.post("/messages")
def cleanup_messages(
    body: Optional[dict] = Body(default=None),
    x_cleanup_secret: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    secret = (body or {}).get("secret") or x_cleanup_secret
    cleanup.require_cleanup_secret(secret)

    now = clock.now()
    deleted = cleanup.delete_old_messages(db, now)
    return {
        "success": True,
        "message": "Old messages deleted successfully",
        "deleted": deleted,
        "timestamp": now.isoformat(),
    }


@router.get("/status")
def cleanup_status(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    now = clock.now()
    pending = cleanup.pending_message_count(db, now)
    return {
        "status": "ok",
        "pending_messages": pending,
        "timestamp": now.isoformat(),
    }
