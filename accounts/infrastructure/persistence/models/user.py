"""User ORM model. Email and username are unique among active rows only."""

from sqlalchemy import Index, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from accounts.core.constants import USERS_TABLE
from accounts.infrastructure.persistence.database import Base
from accounts.infrastructure.persistence.models.mixins import (
    SoftDeleteMixin,
    TimestampMixin,
    UuidMixin,
)


EMAIL_ACTIVE_INDEX = "uq_users_email_active"
USERNAME_ACTIVE_INDEX = "uq_users_username_active"


class User(UuidMixin, TimestampMixin, SoftDeleteMixin, Base):
    """User model. Table: users. ``password`` holds the bcrypt hash."""

    __tablename__ = USERS_TABLE

    email: Mapped[str] = mapped_column(Text, nullable=False)
    username: Mapped[str] = mapped_column(Text, nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index(
            EMAIL_ACTIVE_INDEX,
            "email",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index(
            USERNAME_ACTIVE_INDEX,
            "username",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )
