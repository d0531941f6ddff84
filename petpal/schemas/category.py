"""Category schemas for API responses."""
from pydantic import BaseModel, ConfigDict


class CategoryRead(BaseModel):
    """Schema for reading category data."""
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
