"""Booking service: customer resolution, price snapshots and totals."""
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.models.booking import Booking
from app.models.booking_item import BookingItem
from app.models.customer import Customer
from app.models.inventory_item import InventoryItem
from app.schemas.booking import BookingCreate, BookingUpdate

logger = logging.getLogger(__name__)


class BookingNotFound(ValueError):
    """Raised when a booking id does not exist."""


class InventoryItemNotFound(ValueError):
    """Raised in strict mode when a line item references an unknown item."""


class BookingConflict(Exception):
    """Raised when the store keeps rejecting a booking on a uniqueness constraint."""


class BookingService:
    """Service for creating and maintaining bookings."""

    def __init__(self, strict_inventory: bool = False, recompute_on_update: bool = True):
        """
        Initialize the booking service.

        Args:
            strict_inventory: Reject line items whose inventory item does not
                exist instead of silently dropping them
            recompute_on_update: Recompute final_total when court_price is
                changed through update_booking
        """
        self.strict_inventory = strict_inventory
        self.recompute_on_update = recompute_on_update

    async def get_booking(self, db: AsyncSession, booking_id: int) -> Optional[Booking]:
        """Get a booking with its customer and line items loaded."""
        result = await db.execute(
            select(Booking)
            .options(
                selectinload(Booking.customer),
                selectinload(Booking.items).selectinload(BookingItem.inventory_item),
            )
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create_booking(self, db: AsyncSession, payload: BookingCreate) -> Booking:
        """
        Create a booking together with its line items.

        The customer is looked up by phone and created in the same transaction
        when unknown. If a concurrent request inserts the same phone first, the
        commit fails on the unique constraint and the whole booking is rebuilt
        once, which then links to the customer the other request created.

        Args:
            db: Database session
            payload: Validated booking request

        Returns:
            The persisted booking with relations loaded

        Raises:
            InventoryItemNotFound: strict mode and an item id is unknown
            BookingConflict: the store rejected the booking twice
        """
        for attempt in (1, 2):
            booking = await self._build_booking(db, payload)
            db.add(booking)
            try:
                await db.commit()
                break
            except IntegrityError as e:
                await db.rollback()
                logger.warning(f"Booking insert hit a constraint (attempt {attempt}): {e.orig}")
                if attempt == 2:
                    raise BookingConflict(
                        f"Booking for phone {payload.customer.phone} conflicts with existing data"
                    ) from e

        logger.info(
            f"Created booking {booking.id} for customer {booking.customer_id}: "
            f"court {booking.court_number} on {booking.booking_date} "
            f"{booking.start_time}-{booking.end_time}, total {booking.final_total}"
        )
        return await self.get_booking(db, booking.id)

    async def _build_booking(self, db: AsyncSession, payload: BookingCreate) -> Booking:
        """Resolve the customer, snapshot item prices and compute totals."""
        booking = Booking(
            court_number=payload.court_number,
            booking_date=payload.booking_date.isoformat(),
            start_time=payload.start_time,
            end_time=payload.end_time,
            court_price=payload.court_price,
            discount_amount=payload.discount_amount,
            payment_status=payload.payment_status,
        )

        customer = await self._get_customer_by_phone(db, payload.customer.phone)
        if customer:
            # Existing customer wins; the submitted name is not applied
            booking.customer_id = customer.id
        else:
            booking.customer = Customer(
                phone=payload.customer.phone,
                name=payload.customer.name,
            )

        items_total = Decimal("0")
        inventory = await self._get_inventory_items(db, [i.item_id for i in payload.items])

        for requested in payload.items:
            inventory_item = inventory.get(requested.item_id)
            if inventory_item is None:
                if self.strict_inventory:
                    raise InventoryItemNotFound(f"Inventory item {requested.item_id} not found")
                logger.warning(
                    f"Skipping line item for unknown inventory item {requested.item_id}"
                )
                continue

            booking.items.append(
                BookingItem(
                    item_id=inventory_item.id,
                    inventory_item=inventory_item,
                    quantity=requested.quantity,
                    price_at_booking=inventory_item.current_price,
                )
            )
            items_total += Decimal(inventory_item.current_price) * requested.quantity

        booking.items_total = items_total
        booking.final_total = self.compute_final_total(
            booking.court_price, items_total, booking.discount_amount
        )
        return booking

    async def _get_customer_by_phone(self, db: AsyncSession, phone: str) -> Optional[Customer]:
        result = await db.execute(select(Customer).where(Customer.phone == phone))
        return result.scalar_one_or_none()

    async def _get_inventory_items(
        self, db: AsyncSession, item_ids: List[int]
    ) -> Dict[int, InventoryItem]:
        if not item_ids:
            return {}
        result = await db.execute(
            select(InventoryItem).where(InventoryItem.id.in_(set(item_ids)))
        )
        return {item.id: item for item in result.scalars().all()}

    @staticmethod
    def compute_final_total(
        court_price: Decimal, items_total: Decimal, discount_amount: Decimal
    ) -> Decimal:
        """final_total = court_price + items_total - discount_amount"""
        return court_price + items_total - discount_amount

    async def list_bookings(self, db: AsyncSession, booking_date: date) -> List[Booking]:
        """
        List bookings for a calendar date.

        Args:
            db: Database session
            booking_date: Date to match against the stored ISO date

        Returns:
            Bookings with customer and line items loaded
        """
        result = await db.execute(
            select(Booking)
            .options(
                selectinload(Booking.customer),
                selectinload(Booking.items).selectinload(BookingItem.inventory_item),
            )
            .where(Booking.booking_date == booking_date.isoformat())
            .order_by(Booking.start_time, Booking.id)
        )
        return list(result.scalars().all())

    async def update_booking(
        self, db: AsyncSession, booking_id: int, changes: BookingUpdate
    ) -> Booking:
        """
        Apply the supplied fields to a booking.

        Args:
            db: Database session
            booking_id: Booking ID
            changes: Fields to update; unset and null fields are left alone

        Returns:
            Updated booking

        Raises:
            BookingNotFound: no booking with this id
        """
        booking = await self.get_booking(db, booking_id)
        if not booking:
            raise BookingNotFound(f"Booking {booking_id} not found")

        update_data = changes.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(booking, field, value)

        if "court_price" in update_data and self.recompute_on_update:
            booking.final_total = self.compute_final_total(
                booking.court_price, booking.items_total, booking.discount_amount
            )

        await db.commit()
        logger.info(f"Updated booking {booking_id}: {sorted(update_data)}")

        return await self.get_booking(db, booking_id)

    async def delete_booking(self, db: AsyncSession, booking_id: int) -> None:
        """
        Permanently delete a booking and its line items.

        Raises:
            BookingNotFound: no booking with this id
        """
        result = await db.execute(select(Booking).where(Booking.id == booking_id))
        booking = result.scalar_one_or_none()

        if not booking:
            raise BookingNotFound(f"Booking {booking_id} not found")

        await db.delete(booking)
        await db.commit()
        logger.info(f"Deleted booking {booking_id}")


def get_booking_service() -> BookingService:
    """Dependency returning a service configured from settings."""
    return BookingService(
        strict_inventory=settings.STRICT_INVENTORY_LOOKUP,
        recompute_on_update=settings.RECOMPUTE_TOTAL_ON_UPDATE,
    )
