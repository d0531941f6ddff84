"""Pydantic schemas for message operations."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from petpal.schemas.user import UserSummary


class MessageCreate(BaseModel):
    """
    Schema for sending a message.

    Either ``recipient_id`` or ``animal_id`` must be given. When only the
    animal is given, the message goes to the animal's owner.
    """
    recipient_id: Optional[int] = Field(None, description="Id of the receiving user")
    animal_id: Optional[int] = Field(None, description="Animal the message is about")
    subject: str = Field(..., max_length=255)
    content: str

    @field_validator('subject')
    @classmethod
    def validate_subject(cls, v: str) -> str:
        """Validate subject is not empty or just whitespace."""
        if not v or not v.strip():
            raise ValueError("Subject cannot be empty")
        return v

    @field_validator('content')
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Validate content is not empty or just whitespace."""
        if not v or not v.strip():
            raise ValueError("Content cannot be empty")
        return v

    @model_validator(mode="after")
    def require_target(self) -> "MessageCreate":
        if self.recipient_id is None and self.animal_id is None:
            raise ValueError("A recipient or an animal is required")
        return self


class AnimalSummary(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class MessageRead(BaseModel):
    """Schema for message response."""
    id: int
    sender_id: int
    recipient_id: int
    animal_id: Optional[int] = None
    subject: str
    content: str
    is_read: bool
    timestamp: datetime
    sender: UserSummary
    recipient: UserSummary
    animal: Optional[AnimalSummary] = None

    model_config = ConfigDict(from_attributes=True)


class ReplyDraft(BaseModel):
    """Pre-filled fields for answering a message."""
    in_reply_to: int
    recipient_id: int
    recipient_username: str
    animal_id: Optional[int] = None
    subject: str


class UnreadCountResponse(BaseModel):
    """Schema for unread message count response."""
    unread_count: int
