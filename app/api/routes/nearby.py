from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.clock import Clock, get_clock
from app.core.db import get_db
from app.schemas.presence import NearbyResponse
from app.services import proximity

router = APIRouter()


@router.get("/nearby", response_model=NearbyResponse)
def nearby_users(
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    radius: Optional[str] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    # raw strings so malformed numbers surface as InvalidArgument, not 422
    query = proximity.parse_query(lat, lon, radius)
    users = proximity.find_nearby(db, user_id, query, clock.now())
    return {"users": [asdict(u) for u in users]}
