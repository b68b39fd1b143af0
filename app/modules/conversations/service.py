from datetime import datetime

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, InvalidArgument, NotFound, ServerError
from app.services.visibility import blocked_counterparts
from .models import Conversation, ConversationParticipant, Message


def _require_participant(db: Session, conversation_id: int, user_id: str) -> None:
    participant = db.query(ConversationParticipant).filter(
        ConversationParticipant.conversation_id == conversation_id,
        ConversationParticipant.user_id == user_id,
    ).first()

    if not participant:
        raise Forbidden("Not a participant of this conversation")


# ---------- CONVERSATIONS ----------

def create_conversation(db: Session, creator_id: str, participant_ids: list[str], now: datetime):
    if not participant_ids:
        raise InvalidArgument("Invalid participant IDs")

    # creator first, duplicates dropped, order kept
    everyone = list(dict.fromkeys([creator_id, *participant_ids]))

    blocked = blocked_counterparts(db, creator_id)
    if any(pid in blocked for pid in everyone):
        raise Forbidden("Cannot create conversation with blocked user")

    convo = Conversation(is_terminated=False, created_at=now)

    try:
        db.add(convo)
        db.flush()
        db.add_all(
            ConversationParticipant(
                conversation_id=convo.id,
                user_id=pid,
                joined_at=now,
            )
            for pid in everyone
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error creating conversation | creator={creator_id}")
        raise ServerError("Failed to create conversation")

    db.refresh(convo)
    logger.info(f"Conversation created | id={convo.id} participants={len(everyone)}")
    return convo


def list_conversations(db: Session, user_id: str):
    return (
        db.query(Conversation)
        .join(
            ConversationParticipant,
            ConversationParticipant.conversation_id == Conversation.id,
        )
        .filter(
            ConversationParticipant.user_id == user_id,
            Conversation.is_terminated.is_(False),
        )
        .order_by(Conversation.created_at.desc(), Conversation.id.desc())
        .all()
    )


def terminate_conversation(db: Session, conversation_id: int, user_id: str) -> None:
    _require_participant(db, conversation_id, user_id)

    convo = db.query(Conversation).filter(Conversation.id == conversation_id).first()
    if not convo:
        raise NotFound("Conversation not found")

    try:
        db.query(Message).filter(Message.conversation_id == conversation_id).delete(
            synchronize_session=False
        )
        convo.is_terminated = True
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error terminating conversation | id={conversation_id}")
        raise ServerError("Failed to terminate conversation")

    logger.info(f"Conversation terminated | id={conversation_id} by={user_id}")


# ---------- MESSAGING ----------

def send_message(db: Session, conversation_id: int, sender_id: str, body: str | None, now: datetime):
    if not body or not body.strip():
        raise InvalidArgument("Message body is required")

    _require_participant(db, conversation_id, sender_id)

    convo = db.query(Conversation).filter(Conversation.id == conversation_id).first()
    if not convo:
        raise NotFound("Conversation not found")

    if convo.is_terminated:
        raise InvalidArgument("Conversation is terminated")

    msg = Message(
        conversation_id=conversation_id,
        sender_id=sender_id,
        body=body.strip(),
        created_at=now,
    )

    try:
        db.add(msg)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error sending message | conversation={conversation_id}")
        raise ServerError("Failed to send message")

    db.refresh(msg)
    return msg


def get_messages(db: Session, conversation_id: int, user_id: str):
    _require_participant(db, conversation_id, user_id)

    return (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )
