"""Booking model."""
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Booking(Base):
    """Represents a court reserved by a customer for a time window."""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    court_number = Column(Integer, nullable=False)
    booking_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    start_time = Column(String, nullable=False)  # HH:MM:SS
    end_time = Column(String, nullable=False)
    court_price = Column(Numeric(10, 2), nullable=False, default=0)
    items_total = Column(Numeric(10, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    final_total = Column(Numeric(10, 2), nullable=False, default=0)
    payment_status = Column(String, nullable=False, default="PENDING")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    customer = relationship("Customer", back_populates="bookings")
    items = relationship("BookingItem", back_populates="booking", cascade="all, delete-orphan")

    # Fetch created_at on insert; async sessions cannot lazy-load it afterwards
    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        Index("ix_bookings_date_court", "booking_date", "court_number"),
    )
