"""Booking schemas."""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal

from app.schemas.customer import CustomerIn, CustomerInDB
from app.schemas.inventory import InventoryItemInDB

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$"


class BookingItemCreate(BaseModel):
    """A requested line item."""

    item_id: int
    quantity: int = Field(default=1, gt=0)


class BookingItemInDB(BaseModel):
    """Schema for a booking line item from database."""

    id: int
    booking_id: int
    item_id: int
    quantity: int
    price_at_booking: Decimal
    inventory_details: Optional[InventoryItemInDB] = Field(
        default=None, validation_alias="inventory_item"
    )

    model_config = ConfigDict(from_attributes=True)


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    customer: CustomerIn
    court_number: int = Field(..., ge=1)
    booking_date: date
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    court_price: Decimal = Field(default=Decimal("0"), ge=0)
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)
    payment_status: str = Field(default="PENDING", min_length=1)
    items: List[BookingItemCreate] = []


class BookingUpdate(BaseModel):
    """Schema for updating a booking. Only supplied fields are applied."""

    start_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    payment_status: Optional[str] = Field(default=None, min_length=1)
    court_price: Optional[Decimal] = Field(default=None, ge=0)


class BookingInDB(BaseModel):
    """Schema for booking from database, with customer and line items."""

    id: int
    customer_id: int
    customer: CustomerInDB
    court_number: int
    booking_date: str
    start_time: str
    end_time: str
    court_price: Decimal
    items_total: Decimal
    discount_amount: Decimal
    final_total: Decimal
    payment_status: str
    created_at: Optional[datetime] = None
    items: List[BookingItemInDB] = []

    model_config = ConfigDict(from_attributes=True)


class Message(BaseModel):
    """Plain confirmation message."""

    message: str
