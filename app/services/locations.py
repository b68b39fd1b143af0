"""
Append-only location storage and freshness-window reads.
"""

from datetime import datetime, timedelta
from typing import Iterable, Sequence

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, InvalidArgument, NotFound, ServerError
from app.core.presence_config import LOCATION_WINDOW_SECONDS
from app.models.location import LocationFix
from app.models.user import User
from app.schemas.location import LocationFixIn
from app.services.geo import is_valid_coordinate, truncate_coordinate


def append_batch(
    db: Session,
    caller_id: str,
    user_id: str,
    fixes: Sequence[LocationFixIn],
    now: datetime,
) -> int:
    if caller_id != user_id:
        raise Forbidden()

    if not fixes:
        raise InvalidArgument("Invalid locations data")

    for fix in fixes:
        if not is_valid_coordinate(fix.latitude, fix.longitude):
            raise InvalidArgument("Latitude must be within [-90, 90] and longitude within [-180, 180]")

    try:
        exists = db.query(User.id).filter(User.id == user_id).first()
    except SQLAlchemyError:
        logger.exception(f"Error checking user existence | user={user_id}")
        raise ServerError("Failed to verify user")

    if not exists:
        raise NotFound("User not found")

    rows = [
        LocationFix(
            user_id=user_id,
            latitude=truncate_coordinate(fix.latitude),
            longitude=truncate_coordinate(fix.longitude),
            accuracy=fix.accuracy,
            speed=fix.speed,
            heading=fix.heading,
            recorded_at=fix.recorded_at,
            created_at=now,
        )
        for fix in fixes
    ]

    # single transaction: either every fix lands or none does
    try:
        db.add_all(rows)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error inserting locations | user={user_id} count={len(rows)}")
        raise ServerError("Failed to save locations")

    logger.info(f"Locations saved | user={user_id} inserted={len(rows)}")
    return len(rows)


def latest_within_window(
    db: Session,
    user_ids: Iterable[str],
    now: datetime,
    window_seconds: int = LOCATION_WINDOW_SECONDS,
) -> dict[str, LocationFix]:
    ids = list(set(user_ids))
    if not ids:
        return {}

    cutoff = now - timedelta(seconds=window_seconds)

    rows = (
        db.query(LocationFix)
        .filter(
            LocationFix.user_id.in_(ids),
            LocationFix.recorded_at >= cutoff,
        )
        .order_by(LocationFix.recorded_at.desc(), LocationFix.id.desc())
        .all()
    )

    latest: dict[str, LocationFix] = {}
    for row in rows:
        # rows arrive newest first; keep the first per user
        latest.setdefault(row.user_id, row)

    return latest


def most_recent_for_user(
    db: Session,
    user_id: str,
    now: datetime,
    window_seconds: int = LOCATION_WINDOW_SECONDS,
) -> LocationFix | None:
    cutoff = now - timedelta(seconds=window_seconds)

    return (
        db.query(LocationFix)
        .filter(
            LocationFix.user_id == user_id,
            LocationFix.recorded_at >= cutoff,
        )
        .order_by(LocationFix.recorded_at.desc(), LocationFix.id.desc())
        .first()
    )
