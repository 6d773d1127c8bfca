"""Booking endpoints.

Errors are returned as {"detail": "<message>"} with the HTTP status as the only
error code. Clients of the earlier API that read an "error" key should read
"detail" instead.
"""
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.booking import BookingCreate, BookingUpdate, BookingInDB, Message
from app.services.booking_service import (
    BookingService,
    BookingNotFound,
    InventoryItemNotFound,
    BookingConflict,
    get_booking_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=BookingInDB, status_code=201)
async def create_booking(
    booking: BookingCreate,
    db: AsyncSession = Depends(get_db),
    service: BookingService = Depends(get_booking_service),
):
    """
    Create a booking.

    The customer is matched by phone number. A known phone links the booking
    to the existing customer; an unknown phone creates the customer along
    with the booking. Item prices are copied onto the line items and the
    totals are computed from them.

    Args:
        booking: Booking data with embedded customer and line items
        db: Database session
        service: Booking service

    Returns:
        Created booking
    """
    try:
        return await service.create_booking(db, booking)
    except InventoryItemNotFound as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingConflict as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Could not save booking: {e}")
        raise HTTPException(status_code=500, detail="Could not save booking")


@router.get("", response_model=List[BookingInDB])
async def list_bookings(
    booking_date: Optional[date] = Query(default=None, description="Date to list (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
    service: BookingService = Depends(get_booking_service),
):
    """
    List bookings for a date.

    Args:
        booking_date: Booking date (required)
        db: Database session
        service: Booking service

    Returns:
        Bookings on that date, with customer and line items
    """
    if booking_date is None:
        raise HTTPException(status_code=400, detail="Please provide a booking_date parameter")

    try:
        return await service.list_bookings(db, booking_date)
    except SQLAlchemyError as e:
        logger.error(f"Could not fetch bookings for {booking_date}: {e}")
        raise HTTPException(status_code=500, detail="Could not fetch bookings")


@router.get("/{booking_id}", response_model=BookingInDB)
async def get_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    service: BookingService = Depends(get_booking_service),
):
    """Get a single booking by ID."""
    booking = await service.get_booking(db, booking_id)

    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    return booking


@router.patch("/{booking_id}", response_model=BookingInDB)
async def update_booking(
    booking_id: int,
    booking_update: BookingUpdate,
    db: AsyncSession = Depends(get_db),
    service: BookingService = Depends(get_booking_service),
):
    """
    Update a booking's times, payment status or court price.

    Args:
        booking_id: Booking ID
        booking_update: Fields to update
        db: Database session
        service: Booking service

    Returns:
        Updated booking
    """
    try:
        return await service.update_booking(db, booking_id, booking_update)
    except BookingNotFound:
        raise HTTPException(status_code=404, detail="Booking not found")
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Could not update booking {booking_id}: {e}")
        raise HTTPException(status_code=500, detail="Could not update booking")


@router.delete("/{booking_id}", response_model=Message)
async def delete_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    service: BookingService = Depends(get_booking_service),
):
    """
    Permanently delete a booking and its line items.

    Args:
        booking_id: Booking ID
        db: Database session
        service: Booking service
    """
    try:
        await service.delete_booking(db, booking_id)
    except BookingNotFound:
        raise HTTPException(status_code=404, detail="Booking not found")
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Could not delete booking {booking_id}: {e}")
        raise HTTPException(status_code=500, detail="Could not delete booking")

    return Message(message="Booking deleted successfully")
