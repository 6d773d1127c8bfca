"""Inventory item schemas."""
from pydantic import BaseModel, ConfigDict
from decimal import Decimal


class InventoryItemInDB(BaseModel):
    """Schema for inventory item from database."""

    id: int
    name: str
    type: str  # rental, consumable
    current_price: Decimal
    is_active: bool = True

    model_config = ConfigDict(from_attributes=True)
