from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.clock import Clock, get_clock
from app.core.config import LOCATION_BATCH_RATE_LIMIT
from app.core.db import get_db
from app.core.errors import Forbidden
from app.core.rate_limit import limiter
from app.schemas.location import LocationBatchRequest, LocationBatchResponse, LocationOut
from app.services import locations
from app.services.visibility import is_blocked_pair

router = APIRouter()


@router.post("/batch", response_model=LocationBatchResponse)
@limiter.limit(LOCATION_BATCH_RATE_LIMIT)
def append_locations(
    request: Request,
    payload: LocationBatchRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    inserted = locations.append_batch(
        db,
        caller_id=user_id,
        user_id=payload.user_id,
        fixes=payload.locations,
        now=clock.now(),
    )
    return {"success": True, "inserted": inserted}


@router.get("/{target_id}", response_model=Optional[LocationOut])
def latest_location(
    target_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    if is_blocked_pair(db, user_id, target_id):
        raise Forbidden("User not accessible")

    return locations.most_recent_for_user(db, target_id, clock.now())
