"""Booking line item model."""
from sqlalchemy import Column, Integer, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from app.core.database import Base


class BookingItem(Base):
    """An inventory item added to a booking, priced when the booking was made."""

    __tablename__ = "booking_items"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    # Copied from InventoryItem.current_price; never recomputed
    price_at_booking = Column(Numeric(10, 2), nullable=False, default=0)

    # Relationships
    booking = relationship("Booking", back_populates="items")
    inventory_item = relationship("InventoryItem")
