"""Inventory item model."""
from sqlalchemy import Column, Integer, String, Boolean, Numeric
from app.core.database import Base


class InventoryItem(Base):
    """Represents something a customer can rent or buy with a booking."""

    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)  # rental, consumable
    current_price = Column(Numeric(10, 2), nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)
