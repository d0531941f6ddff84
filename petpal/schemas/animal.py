"""Animal schemas for API request/response validation."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from petpal.schemas.category import CategoryRead
from petpal.schemas.user import UserSummary


class AnimalBase(BaseModel):
    """Base schema for animal data."""
    name: str = Field(..., min_length=1, max_length=100)
    age: int = Field(0, ge=0)
    gender: Optional[str] = Field(None, max_length=20)
    short_description: Optional[str] = Field(None, max_length=255)
    full_description: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name_not_whitespace(cls, v: str) -> str:
        """Ensure name is not empty or whitespace-only."""
        if not v or not v.strip():
            raise ValueError('Name cannot be empty or whitespace-only')
        return v.strip()


class AnimalCreate(AnimalBase):
    """Schema for listing a new animal."""
    category_id: int


class AnimalRead(AnimalBase):
    """
    Schema for reading animal data.

    ``image_base64`` is filled only by reads that render pictures; it is
    None for animals without an image.
    """
    id: int
    owner_id: int
    category_id: int
    timestamp: Optional[datetime] = None
    owner: UserSummary
    category: CategoryRead
    has_image: bool = False
    image_base64: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AnimalSearchParams(BaseModel):
    """
    Filters and ordering for the public animal directory.

    ``sort_by`` accepts ``name``, ``age`` or ``category``; anything else
    orders by listing time. ``sort_dir`` is ``DESC`` (any case) or ascending.
    """
    category_id: Optional[int] = None
    gender: Optional[str] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    sort_by: Optional[str] = "timestamp"
    sort_dir: Optional[str] = "DESC"
