import hmac
from datetime import datetime, timedelta

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import CLEANUP_SECRET, MESSAGE_RETENTION_HOURS
from app.core.errors import ServerError, Unauthenticated
from app.modules.conversations.models import Message


def require_cleanup_secret(provided) -> None:
    if not CLEANUP_SECRET:
        logger.error("[cleanup] CLEANUP_SECRET not configured")
        raise ServerError()

    # client input may be any JSON value or carry non-ASCII text
    if not isinstance(provided, str) or not provided:
        raise Unauthenticated()

    if not hmac.compare_digest(provided.encode(), CLEANUP_SECRET.encode()):
        raise Unauthenticated()


def delete_old_messages(
    db: Session,
    now: datetime,
    retention_hours: int = MESSAGE_RETENTION_HOURS,
) -> int:
    cutoff = now - timedelta(hours=retention_hours)

    try:
        deleted = (
            db.query(Message)
            .filter(Message.created_at < cutoff)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("[cleanup] failed to delete old messages")
        raise ServerError("Failed to delete old messages")

    logger.info(f"[cleanup] deleted {deleted} messages older than {cutoff.isoformat()}")
    return deleted


def pending_message_count(
    db: Session,
    now: datetime,
    retention_hours: int = MESSAGE_RETENTION_HOURS,
) -> int:
    """Messages past retention that the next cleanup run would delete."""
    cutoff = now - timedelta(hours=retention_hours)

    try:
        return db.query(Message).filter(Message.created_at < cutoff).count()
    except SQLAlchemyError:
        logger.exception("[cleanup] status check failed")
        raise ServerError("Cleanup store unavailable")
