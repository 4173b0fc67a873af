"""User ORM — persisted user records.

Invariants:
    - id is an autoincrement integer primary key
    - name is non-nullable and UNIQUE: the only guard against two concurrent
      creations of the same name
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from user_registry.db.base import Base


class User(Base):
    """A registered user."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
