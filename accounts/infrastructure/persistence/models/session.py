"""Session ORM model: login sessions owned by a user, removed by a hard delete."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from accounts.core.constants import SESSIONS_TABLE, USERS_TABLE
from accounts.infrastructure.persistence.database import Base
from accounts.infrastructure.persistence.models.mixins import UuidMixin


class UserSession(UuidMixin, Base):
    """Session model. Table: sessions. No ON DELETE CASCADE; hard delete removes rows explicitly."""

    __tablename__ = SESSIONS_TABLE

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey(f"{USERS_TABLE}.id"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
