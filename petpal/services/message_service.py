"""Messaging service: inbox/sent listings, sending, replies and role-checked deletion."""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from petpal.models.animal import Animal
from petpal.models.message import Message
from petpal.models.user import User
from petpal.schemas.message import ReplyDraft


logger = logging.getLogger(__name__)


REPLY_PREFIX = "Re: "


class MessageService:
    """Service for messages exchanged between users."""

    def _listing_query(self):
        return select(Message).options(
            joinedload(Message.sender),
            joinedload(Message.recipient),
            joinedload(Message.animal),
        )

    async def load_inbox(self, db: AsyncSession, user: User) -> List[Message]:
        """Messages received by ``user``, newest first."""
        query = (
            self._listing_query()
            .where(Message.recipient_id == user.id)
            .order_by(Message.timestamp.desc(), Message.id.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def load_sent(self, db: AsyncSession, user: User) -> List[Message]:
        """Messages sent by ``user``, newest first."""
        query = (
            self._listing_query()
            .where(Message.sender_id == user.id)
            .order_by(Message.timestamp.desc(), Message.id.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_message(self, db: AsyncSession, message_id: Optional[int]) -> Optional[Message]:
        if message_id is None:
            return None
        return await db.get(Message, message_id)

    async def find_animal(self, db: AsyncSession, animal_id: Optional[int]) -> Optional[Animal]:
        if animal_id is None:
            return None
        return await db.get(Animal, animal_id)

    async def send_message(
        self,
        db: AsyncSession,
        sender: User,
        recipient: User,
        animal: Optional[Animal],
        subject: str,
        content: str,
        when: Optional[datetime] = None,
    ) -> Message:
        """
        Store a new message.

        The caller is expected to have checked that the recipient is set and
        that subject and content are not blank.
        """
        message = Message(
            sender=sender,
            recipient=recipient,
            animal=animal,
            subject=subject,
            content=content,
            timestamp=when if when is not None else datetime.now(timezone.utc),
            is_read=False,
        )

        try:
            db.add(message)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            f"Message {message.id} sent from user {sender.id} to user {recipient.id}"
        )
        return message

    async def prepare_reply(
        self, db: AsyncSession, current_user: User, message_id: int
    ) -> Optional[ReplyDraft]:
        """
        Build a reply draft addressed to the original sender.

        Only the sender or the recipient of the original may reply to it.
        """
        original = await self.find_message(db, message_id)
        if original is None or current_user.id not in (original.sender_id, original.recipient_id):
            return None

        return ReplyDraft(
            in_reply_to=original.id,
            recipient_id=original.sender_id,
            recipient_username=original.sender.username,
            animal_id=original.animal_id,
            subject=REPLY_PREFIX + (original.subject or ""),
        )

    async def _delete_if(self, db: AsyncSession, message_id: Optional[int], allowed) -> bool:
        try:
            message = await self.find_message(db, message_id)
            if message is None or not allowed(message):
                return False
            await db.delete(message)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return True

    async def delete_from_inbox(
        self, db: AsyncSession, current_user: User, message_id: Optional[int]
    ) -> bool:
        """Delete a message the user received. False when missing or not theirs."""
        deleted = await self._delete_if(
            db, message_id, lambda m: m.recipient_id == current_user.id
        )
        if deleted:
            logger.info(f"Message {message_id} deleted from inbox of user {current_user.id}")
        return deleted

    async def delete_from_sent(
        self, db: AsyncSession, current_user: User, message_id: Optional[int]
    ) -> bool:
        """Delete a message the user sent. False when missing or not theirs."""
        deleted = await self._delete_if(
            db, message_id, lambda m: m.sender_id == current_user.id
        )
        if deleted:
            logger.info(f"Message {message_id} deleted from sent items of user {current_user.id}")
        return deleted

    async def mark_as_read(
        self, db: AsyncSession, current_user: User, message_id: int
    ) -> Optional[Message]:
        """Mark a received message as read. Idempotent; recipient only."""
        message = await self.find_message(db, message_id)
        if message is None or message.recipient_id != current_user.id:
            return None

        if not message.is_read:
            message.is_read = True
            try:
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        return message

    async def unread_count(self, db: AsyncSession, user: User) -> int:
        query = select(func.count()).select_from(Message).where(
            Message.recipient_id == user.id,
            Message.is_read == False,  # noqa: E712
        )
        result = await db.execute(query)
        return result.scalar_one()


# Singleton instance
message_service = MessageService()
