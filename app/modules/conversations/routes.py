from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.clock import Clock, get_clock
from app.core.db import get_db
from app.schemas.conversation import (
    ConversationCreateRequest,
    ConversationOut,
    MessageOut,
    MessageSendRequest,
)
from .service import (
    create_conversation,
    list_conversations,
    terminate_conversation,
    send_message,
    get_messages,
)

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post("")
def conversation_create(
    payload: ConversationCreateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    convo = create_conversation(db, user_id, payload.participant_ids, clock.now())
    return {"conversation_id": convo.id}


@router.get("", response_model=List[ConversationOut])
def conversation_list(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return list_conversations(db, user_id)


@router.post("/{conversation_id}/messages")
def message_send(
    conversation_id: int,
    payload: MessageSendRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    msg = send_message(db, conversation_id, user_id, payload.body, clock.now())
    return {"message_id": msg.id}


@router.get("/{conversation_id}/messages", response_model=List[MessageOut])
def message_list(
    conversation_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_messages(db, conversation_id, user_id)


@router.post("/{conversation_id}/terminate")
def conversation_terminate(
    conversation_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    terminate_conversation(db, conversation_id, user_id)
    return {"success": True}
