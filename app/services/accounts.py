"""
Account lifecycle: lazy creation, profile edits, deletion with cascade.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any

from loguru import logger
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, InvalidArgument, NotFound, ServerError
from app.models.block import Block
from app.models.location import LocationFix
from app.models.user import User
from app.modules.conversations.models import ConversationParticipant, Message
from app.schemas.enums import Gender
from app.services import storage
from app.services.visibility import is_blocked_pair

BIO_MAX_LENGTH = 500
MIN_AGE = 13
MAX_AGE = 120


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass
class ProfileUpdate:
    """
    One entry per editable field. Each is UNSET (leave alone), None (clear)
    or a value (set).
    """

    name: Any = UNSET
    bio: Any = UNSET
    age: Any = UNSET
    location: Any = UNSET
    gender: Any = UNSET

    @classmethod
    def from_fields(cls, values: dict) -> "ProfileUpdate":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})

    def provided(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


def _clean_profile_update(update: ProfileUpdate) -> dict:
    changes: dict = {}

    for field, value in update.provided().items():
        if field == "name":
            if value is None or not value.strip():
                raise InvalidArgument("Name cannot be empty if provided")
            changes["name"] = value.strip()

        elif field == "bio":
            if value is not None and len(value) > BIO_MAX_LENGTH:
                raise InvalidArgument(f"Bio must be {BIO_MAX_LENGTH} characters or less")
            changes["bio"] = (value or "").strip() or None

        elif field == "age":
            if value is not None and not (MIN_AGE <= value <= MAX_AGE):
                raise InvalidArgument(f"Age must be between {MIN_AGE} and {MAX_AGE}")
            changes["age"] = value

        elif field == "location":
            changes["location"] = (value or "").strip() or None

        elif field == "gender":
            if value is None:
                changes["gender"] = None
            else:
                try:
                    changes["gender"] = Gender(value)
                except ValueError:
                    allowed = ", ".join(g.value for g in Gender)
                    raise InvalidArgument(f"Gender must be one of: {allowed}")

    return changes


def get_or_create_profile(db: Session, user_id: str, now: datetime) -> User:
    user = db.get(User, user_id)
    if user:
        return user

    logger.warning(f"Profile not found, attempting to create | user={user_id}")

    identity = storage.fetch_identity(user_id)
    if identity is None:
        raise NotFound("User not found")

    user = User(
        id=user_id,
        email=identity.email,
        name=identity.name or identity.email.split("@")[0],
        created_at=now,
        updated_at=now,
    )

    try:
        db.add(user)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error creating profile | user={user_id}")
        raise ServerError("Failed to create profile")

    db.refresh(user)
    logger.info(f"Profile created | user={user_id}")
    return user


def update_profile(db: Session, user_id: str, update: ProfileUpdate, now: datetime) -> User:
    changes = _clean_profile_update(update)

    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    for field, value in changes.items():
        setattr(user, field, value)
    user.updated_at = now

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error updating profile | user={user_id}")
        raise ServerError("Failed to update profile")

    logger.info(f"Profile updated | user={user_id} fields={sorted(changes)}")
    return user


def confirm_profile_image(
    db: Session,
    caller_id: str,
    user_id: str,
    storage_path: str,
    public_url: str,
    now: datetime,
) -> None:
    if caller_id != user_id:
        raise Forbidden()

    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    user.profile_image_path = storage_path
    user.profile_image_url = public_url
    user.updated_at = now

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error updating profile image | user={user_id}")
        raise ServerError("Failed to update profile")


def public_profile(db: Session, viewer_id: str, user_id: str) -> User:
    if is_blocked_pair(db, viewer_id, user_id):
        raise Forbidden("User not accessible")

    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def delete_account(db: Session, user_id: str) -> None:
    logger.info(f"Account deletion requested | user={user_id}")

    user = db.get(User, user_id)
    if user and user.profile_image_path:
        storage.remove_profile_image(user.profile_image_path)

    try:
        db.query(LocationFix).filter(LocationFix.user_id == user_id).delete(synchronize_session=False)
        db.query(Message).filter(Message.sender_id == user_id).delete(synchronize_session=False)
        db.query(ConversationParticipant).filter(
            ConversationParticipant.user_id == user_id
        ).delete(synchronize_session=False)
        db.query(Block).filter(
            or_(Block.blocker_id == user_id, Block.blocked_id == user_id)
        ).delete(synchronize_session=False)
        db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error deleting account | user={user_id}")
        raise ServerError("Failed to delete account")

    storage.delete_identity(user_id)
    logger.info(f"Account deleted | user={user_id}")
