"""Pydantic schemas for request/response validation."""
from petpal.schemas.user import (
    UserRead,
    UserCreate,
    UserUpdate,
    UserSummary,
    TempPasswordConfirm,
    TempPasswordIssued,
    TempPasswordRequest,
    TempPasswordResponse,
    PasswordChange,
    PasswordChangeResponse,
)
from petpal.schemas.category import CategoryRead
from petpal.schemas.animal import AnimalBase, AnimalCreate, AnimalRead, AnimalSearchParams
from petpal.schemas.favorite import FavoriteRead, FavoriteStatus
from petpal.schemas.message import (
    MessageCreate,
    MessageRead,
    ReplyDraft,
    UnreadCountResponse,
)

__all__ = [
    # User schemas
    "UserRead",
    "UserCreate",
    "UserUpdate",
    "UserSummary",
    "TempPasswordConfirm",
    "TempPasswordIssued",
    "TempPasswordRequest",
    "TempPasswordResponse",
    "PasswordChange",
    "PasswordChangeResponse",
    # Category schemas
    "CategoryRead",
    # Animal schemas
    "AnimalBase",
    "AnimalCreate",
    "AnimalRead",
    "AnimalSearchParams",
    # Favorite schemas
    "FavoriteRead",
    "FavoriteStatus",
    # Message schemas
    "MessageCreate",
    "MessageRead",
    "ReplyDraft",
    "UnreadCountResponse",
]
