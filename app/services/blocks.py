from datetime import datetime

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import InvalidArgument, NotFound, ServerError
from app.models.block import Block
from app.models.user import User


def create_block(db: Session, blocker_id: str, blocked_id: str | None, now: datetime) -> Block:
    if not blocked_id:
        raise InvalidArgument("Blocked user ID is required")

    if blocked_id == blocker_id:
        raise InvalidArgument("Cannot block yourself")

    existing = (
        db.query(Block)
        .filter(Block.blocker_id == blocker_id, Block.blocked_id == blocked_id)
        .first()
    )
    if existing:
        raise InvalidArgument("User is already blocked")

    if not db.query(User.id).filter(User.id == blocked_id).first():
        raise NotFound("User not found")

    block = Block(blocker_id=blocker_id, blocked_id=blocked_id, created_at=now)

    try:
        db.add(block)
        db.commit()
    except IntegrityError:
        # lost a race with an identical request
        db.rollback()
        raise InvalidArgument("User is already blocked")
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error creating block | blocker={blocker_id} blocked={blocked_id}")
        raise ServerError("Failed to block user")

    db.refresh(block)
    logger.info(f"Block created | blocker={blocker_id} blocked={blocked_id}")
    return block


def delete_block(db: Session, blocker_id: str, blocked_id: str) -> int:
    try:
        deleted = (
            db.query(Block)
            .filter(Block.blocker_id == blocker_id, Block.blocked_id == blocked_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error removing block | blocker={blocker_id} blocked={blocked_id}")
        raise ServerError("Failed to unblock user")

    logger.info(f"Block removed | blocker={blocker_id} blocked={blocked_id} rows={deleted}")
    return deleted


def list_blocks(db: Session, blocker_id: str) -> list[Block]:
    return (
        db.query(Block)
        .filter(Block.blocker_id == blocker_id)
        .order_by(Block.created_at.desc(), Block.id.desc())
        .all()
    )
