"""
Presence tracking.

``presence_status`` is advisory. Nothing corrects a stale ``online`` flag at
write time: readers re-check ``last_active_at`` against a window, and the
cleanup sweep (:func:`demote_stale`) flips long-idle users to offline. The
read window (120 s) is looser than the sweep threshold (60 s) so one missed
heartbeat does not make a user flicker out of nearby results.
"""

from datetime import datetime, timedelta

from loguru import logger
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, InvalidArgument, NotFound, ServerError
from app.core.presence_config import ONLINE_WINDOW_SECONDS, STALE_AFTER_SECONDS
from app.models.user import User
from app.schemas.enums import PresenceStatus


def parse_status(status) -> PresenceStatus:
    if isinstance(status, PresenceStatus):
        return status
    try:
        return PresenceStatus(status)
    except ValueError:
        raise InvalidArgument("Invalid status")


def _touch(
    db: Session,
    user_id: str,
    now: datetime,
    status: PresenceStatus | None,
) -> int:
    values = {"last_active_at": now}
    if status is not None:
        values["presence_status"] = status

    try:
        updated = (
            db.query(User)
            .filter(User.id == user_id)
            .update(values, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error updating presence | user={user_id}")
        raise ServerError("Failed to update presence")

    return updated


def heartbeat(
    db: Session,
    caller_id: str,
    user_id: str,
    now: datetime,
    status=None,
) -> None:
    if caller_id != user_id:
        raise Forbidden()

    # "" from older clients means "no change"
    parsed = parse_status(status) if status else None

    if not _touch(db, user_id, now, parsed):
        raise NotFound("User not found")

    logger.debug(f"Heartbeat | user={user_id} status={parsed.value if parsed else '-'}")


def set_status(db: Session, user_id: str, status, now: datetime) -> PresenceStatus:
    parsed = parse_status(status)

    if not _touch(db, user_id, now, parsed):
        raise NotFound("User not found")

    logger.info(f"Presence status | user={user_id} status={parsed.value}")
    return parsed


def list_online_within_window(
    db: Session,
    exclude_user_id: str,
    now: datetime,
    window_seconds: int = ONLINE_WINDOW_SECONDS,
) -> list[User]:
    cutoff = now - timedelta(seconds=window_seconds)

    return (
        db.query(User)
        .filter(
            User.presence_status == PresenceStatus.online,
            User.last_active_at >= cutoff,
            User.id != exclude_user_id,
        )
        .all()
    )


def demote_stale(
    db: Session,
    now: datetime,
    stale_after_seconds: int = STALE_AFTER_SECONDS,
) -> list[str]:
    cutoff = now - timedelta(seconds=stale_after_seconds)

    try:
        stale_ids = [
            row.id
            for row in db.query(User.id).filter(
                User.presence_status == PresenceStatus.online,
                or_(User.last_active_at < cutoff, User.last_active_at.is_(None)),
            )
        ]

        if stale_ids:
            (
                db.query(User)
                .filter(
                    User.id.in_(stale_ids),
                    User.presence_status == PresenceStatus.online,
                    or_(User.last_active_at < cutoff, User.last_active_at.is_(None)),
                )
                .update(
                    {"presence_status": PresenceStatus.offline},
                    synchronize_session=False,
                )
            )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error demoting inactive users")
        raise ServerError("Failed to update inactive users")

    logger.info(f"Demoted {len(stale_ids)} inactive users to offline")
    return stale_ids
