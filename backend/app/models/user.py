"""User model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.roadmap import Roadmap


class User(Base):
    """Account created by registration or on first OAuth login."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String)
    email: Mapped[str] = mapped_column(String, unique=True, index=True)

    # Credentials: a password hash for local accounts, provider identity otherwise
    password_hash: Mapped[str | None] = mapped_column(String, default=None)
    auth_provider: Mapped[str] = mapped_column(String, default="local")  # local | google | github
    provider_id: Mapped[str | None] = mapped_column(String, default=None)

    # Profile
    avatar: Mapped[str | None] = mapped_column(String, default=None)

    # Ownership set; loaded only when asked for
    roadmaps: Mapped[list["Roadmap"]] = relationship(
        back_populates="creator",
        cascade="all, delete-orphan",
        lazy="raise",
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
