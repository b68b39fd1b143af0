"""
Block-based visibility.

Blocks are stored with a direction but every check here is symmetric: if
either user blocked the other, neither sees the other. Nothing is cached;
blocks can change between requests.
"""

from typing import Sequence, TypeVar

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from app.models.block import Block

T = TypeVar("T")


def is_blocked_pair(db: Session, user_a: str, user_b: str) -> bool:
    row = (
        db.query(Block.id)
        .filter(
            or_(
                and_(Block.blocker_id == user_a, Block.blocked_id == user_b),
                and_(Block.blocker_id == user_b, Block.blocked_id == user_a),
            )
        )
        .first()
    )
    return row is not None


def blocked_counterparts(db: Session, user_id: str) -> set[str]:
    """Everyone on the other side of a block involving ``user_id``."""
    rows = (
        db.query(Block.blocker_id, Block.blocked_id)
        .filter(or_(Block.blocker_id == user_id, Block.blocked_id == user_id))
        .all()
    )

    counterparts: set[str] = set()
    for blocker_id, blocked_id in rows:
        counterparts.add(blocked_id if blocker_id == user_id else blocker_id)
    return counterparts


def filter_blocked(db: Session, requester_id: str, candidates: Sequence[T]) -> list[T]:
    """Drop candidates (anything with an ``id``) in a blocked pair with the requester."""
    if not candidates:
        return []

    excluded = blocked_counterparts(db, requester_id)
    return [c for c in candidates if c.id not in excluded]
