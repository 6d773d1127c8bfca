"""API schemas."""
from app.schemas.customer import CustomerIn, CustomerInDB
from app.schemas.inventory import InventoryItemInDB
from app.schemas.booking import (
    BookingItemCreate,
    BookingItemInDB,
    BookingCreate,
    BookingUpdate,
    BookingInDB,
    Message,
)

__all__ = [
    "CustomerIn",
    "CustomerInDB",
    "InventoryItemInDB",
    "BookingItemCreate",
    "BookingItemInDB",
    "BookingCreate",
    "BookingUpdate",
    "BookingInDB",
    "Message",
]
