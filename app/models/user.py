from sqlalchemy import Column, String, Integer, Enum, DateTime, Index, func
from app.core.db import Base
from app.schemas.enums import PresenceStatus, Gender


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)

    email = Column(String, nullable=False)
    name = Column(String, nullable=True)

    profile_image_url = Column(String, nullable=True)
    profile_image_path = Column(String, nullable=True)

    # advisory: only trusted together with a recent last_active_at
    presence_status = Column(
        Enum(PresenceStatus, name="presence_status_enum"),
        nullable=False,
        default=PresenceStatus.offline,
    )
    last_active_at = Column(DateTime, nullable=True)

    bio = Column(String(500), nullable=True)
    age = Column(Integer, nullable=True)
    location = Column(String, nullable=True)
    gender = Column(
        Enum(
            Gender,
            name="gender_enum",
            values_callable=lambda e: [member.value for member in e],
        ),
        nullable=True,
    )

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_users_presence", "presence_status", "last_active_at"),
    )

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        return (self.email or "").split("@")[0]
