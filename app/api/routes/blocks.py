from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.clock import Clock, get_clock
from app.core.db import get_db
from app.schemas.block import BlockCreateRequest, BlockOut
from app.services import blocks

router = APIRouter()


@router.post("")
def block_user(
    payload: BlockCreateRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    blocks.create_block(db, user_id, payload.blocked_user_id, clock.now())
    return {"success": True}


@router.delete("/{blocked_user_id}")
def unblock_user(
    blocked_user_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    blocks.delete_block(db, user_id, blocked_user_id)
    return {"success": True}


@router.get("", response_model=List[BlockOut])
def list_blocked_users(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return blocks.list_blocks(db, user_id)
