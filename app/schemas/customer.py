"""Customer schemas."""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime


class CustomerIn(BaseModel):
    """Customer details embedded in a booking request."""

    phone: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    @field_validator("phone", "name")
    @classmethod
    def strip_and_require(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class CustomerInDB(BaseModel):
    """Schema for customer from database."""

    id: int
    phone: str
    name: str
    loyalty_points: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
