"""Message model for user-to-user communication about animals."""
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, Integer, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petpal.database import Base

if TYPE_CHECKING:
    from petpal.models.animal import Animal
    from petpal.models.user import User


class Message(Base):
    """
    Message sent from one registered user to another.

    Both parties see the same row: deleting it from the inbox or from the
    sent folder removes it for both.
    """
    __tablename__ = "messages"

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    sender_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )
    recipient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )
    animal_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("animals.id"),
        nullable=True,
        index=True
    )

    # Message content
    subject: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

    # Message status
    is_read: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        index=True
    )

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True
    )

    # Relationships
    sender: Mapped["User"] = relationship(
        "User",
        foreign_keys=[sender_id],
        lazy="selectin"
    )
    recipient: Mapped["User"] = relationship(
        "User",
        foreign_keys=[recipient_id],
        lazy="selectin"
    )
    animal: Mapped[Optional["Animal"]] = relationship(
        "Animal",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, sender_id={self.sender_id}, recipient_id={self.recipient_id}, is_read={self.is_read})>"
