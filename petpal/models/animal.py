"""Animal model for adoption listings."""
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petpal.database import Base

if TYPE_CHECKING:
    from petpal.models.category import Category
    from petpal.models.user import User


class Animal(Base):
    """
    Animal listed for adoption by its owner.

    The picture is stored inline as a blob. ``image_base64`` is not a
    column: AnimalService fills it in for display when a listing is read.
    """
    __tablename__ = "animals"
    __table_args__ = (
        CheckConstraint("age >= 0", name="ck_animals_age_non_negative"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    # Foreign keys
    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=False,
        index=True
    )

    # Basic information
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )
    age: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0
    )
    gender: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True
    )
    short_description: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
    )
    full_description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    # Picture bytes as uploaded
    image_blob: Mapped[Optional[bytes]] = mapped_column(
        LargeBinary,
        nullable=True
    )

    # Listing time, stamped by AnimalService.save_animal
    timestamp: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True
    )

    # Relationships
    owner: Mapped["User"] = relationship(
        "User",
        lazy="selectin"
    )
    category: Mapped["Category"] = relationship(
        "Category",
        lazy="selectin"
    )

    # Display-only annotation, never persisted
    image_base64 = None

    @property
    def has_image(self) -> bool:
        return bool(self.image_blob)

    def __repr__(self) -> str:
        return f"<Animal(id={self.id}, name={self.name}, owner_id={self.owner_id})>"
