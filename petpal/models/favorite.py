"""Favorite model linking a user to an animal they bookmarked."""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petpal.database import Base

if TYPE_CHECKING:
    from petpal.models.animal import Animal
    from petpal.models.user import User


class Favorite(Base):
    """
    A (user, animal) bookmark.

    The unique constraint on the pair is what actually prevents duplicates;
    FavoriteService only checks first to avoid a failed insert.
    """
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "animal_id", name="uq_favorites_user_animal"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )
    animal_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("animals.id"),
        nullable=False,
        index=True
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        lazy="selectin"
    )
    animal: Mapped["Animal"] = relationship(
        "Animal",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Favorite(id={self.id}, user_id={self.user_id}, animal_id={self.animal_id})>"
