"""
Messages router for user-to-user communication about animals.

This module provides endpoints for sending messages, reading the inbox
and sent items, preparing replies and role-checked deletion.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from petpal.database import get_async_session
from petpal.dependencies import current_active_user
from petpal.models.message import Message
from petpal.models.user import User
from petpal.schemas.message import (
    MessageCreate,
    MessageRead,
    ReplyDraft,
    UnreadCountResponse,
)
from petpal.services.message_service import message_service

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/api/messages",
    tags=["messages"],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Message not found"},
    }
)


def message_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Message not found"
    )


@router.get("/inbox", response_model=List[MessageRead])
async def list_inbox(
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> List[Message]:
    """List messages received by the authenticated user, newest first."""
    return await message_service.load_inbox(session, user)


@router.get("/sent", response_model=List[MessageRead])
async def list_sent(
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> List[Message]:
    """List messages sent by the authenticated user, newest first."""
    return await message_service.load_sent(session, user)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> UnreadCountResponse:
    """Get count of unread messages in the user's inbox."""
    count = await message_service.unread_count(session, user)
    return UnreadCountResponse(unread_count=count)


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_data: MessageCreate,
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> Message:
    """
    Send a message to another user.

    **Request Body:**
    ```json
    {
        "animal_id": 3,
        "subject": "About Rex",
        "content": "Is he still available?"
    }
    ```

    **Validation:**
    - recipient_id or animal_id is required; with only animal_id the
      message goes to the animal's owner
    - the recipient and the animal must exist
    - subject and content must not be blank
    """
    animal = None
    if message_data.animal_id is not None:
        animal = await message_service.find_animal(session, message_data.animal_id)
        if animal is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Animal not found"
            )

    recipient_id = message_data.recipient_id
    if recipient_id is None:
        recipient_id = animal.owner_id

    recipient = await session.get(User, recipient_id)
    if recipient is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Recipient not found"
        )

    return await message_service.send_message(
        session,
        sender=user,
        recipient=recipient,
        animal=animal,
        subject=message_data.subject,
        content=message_data.content,
    )


@router.get("/{message_id}/reply", response_model=ReplyDraft)
async def prepare_reply(
    message_id: int,
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> ReplyDraft:
    """
    Get a reply draft addressed to the original sender.

    The subject is the original subject prefixed with "Re: ". Only the
    sender or the recipient of the original message may reply.
    """
    draft = await message_service.prepare_reply(session, user, message_id)
    if draft is None:
        raise message_not_found()
    return draft


@router.patch("/{message_id}/read", response_model=MessageRead)
async def mark_message_read(
    message_id: int,
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> Message:
    """Mark a received message as read. Only the recipient may do this."""
    message = await message_service.mark_as_read(session, user, message_id)
    if message is None:
        raise message_not_found()
    return message


@router.delete("/inbox/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_from_inbox(
    message_id: int,
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> None:
    """Delete a message the user received."""
    if not await message_service.delete_from_inbox(session, user, message_id):
        raise message_not_found()


@router.delete("/sent/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_from_sent(
    message_id: int,
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> None:
    """Delete a message the user sent."""
    if not await message_service.delete_from_sent(session, user, message_id):
        raise message_not_found()
