"""Database models."""
from app.models.customer import Customer
from app.models.inventory_item import InventoryItem
from app.models.booking import Booking
from app.models.booking_item import BookingItem

__all__ = ["Customer", "InventoryItem", "Booking", "BookingItem"]
