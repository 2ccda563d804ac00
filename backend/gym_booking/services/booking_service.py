"""Booking reservations and active-booking conflict detection."""
from datetime import date, datetime
from typing import List, Optional
import asyncio

from ..errors import BookingConflictError, BookingNotFoundError
from ..models import Booking, BookingStatus, OrderRequest
from ..utils.logger import logger
from .storage_service import BOOKINGS, StorageService, storage_service


class BookingService:
    """Service owning the booking collection.

    Every mutation runs under one lock, so the conflict check and the insert
    done by ``reserve`` cannot interleave with another reservation.
    """

    def __init__(self, storage: Optional[StorageService] = None):
        """Initialize the booking service.

        Args:
            storage: Storage service instance. Defaults to global storage_service
        """
        self.storage = storage or storage_service
        self._lock = asyncio.Lock()

    def _load_all(self) -> List[Booking]:
        return [Booking.model_validate(doc) for doc in self.storage.list_documents(BOOKINGS)]

    def _save(self, booking: Booking) -> Booking:
        booking.updated_at = datetime.now()
        self.storage.save_document(BOOKINGS, booking.id, booking.to_document())
        return booking

    def _find_conflict(
        self,
        user_id: str,
        gym_id: str,
        start: Optional[date],
        end: Optional[date],
        today: Optional[date],
    ) -> Optional[Booking]:
        today = today or date.today()
        for booking in self._load_all():
            if booking.user_id != user_id or booking.gym_id != gym_id or not booking.is_live:
                continue
            if start is not None and end is not None:
                if booking.overlaps(start, end):
                    return booking
            elif booking.end_date >= today:
                return booking
        return None

    async def find_active_booking(
        self,
        user_id: str,
        gym_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> Optional[Booking]:
        """Find a live booking of the user at the gym that blocks a new one.

        With a requested range, a booking blocks when the ranges overlap
        (inclusive). Without one, any booking ending today or later blocks.

        Args:
            user_id: User identifier
            gym_id: Gym identifier
            start: Requested start date
            end: Requested end date
            today: Reference date. Defaults to date.today()

        Returns:
            The conflicting booking or None
        """
        return self._find_conflict(user_id, gym_id, start, end, today)

    async def reserve(
        self, order: OrderRequest, order_id: str, gym_name: Optional[str] = None
    ) -> Booking:
        """Atomically check for a conflict and insert a pending booking.

        Args:
            order: Validated order request
            order_id: Gateway order identifier
            gym_name: Stored gym name. Defaults to the name on the order

        Returns:
            The new pending booking

        Raises:
            BookingConflictError: If a live booking overlaps the requested dates
        """
        async with self._lock:
            conflict = self._find_conflict(
                order.user_id, order.gym_id, order.start_date, order.end_date, None
            )
            if conflict:
                logger.info(
                    f"Reservation rejected for user {order.user_id} at gym {order.gym_id}: "
                    f"overlaps booking {conflict.id}"
                )
                raise BookingConflictError(conflict)

            booking = Booking(
                id=self.storage.generate_id(),
                order_id=order_id,
                user_id=order.user_id,
                gym_id=order.gym_id,
                gym_name=gym_name or order.gym_names,
                selected_plan=order.selected_plan,
                amount=order.amount,
                base_amount=order.base_amount,
                number_of_slots=order.number_of_slots,
                currency=order.currency,
                start_date=order.start_date,
                end_date=order.end_date,
                booking_date=order.booking_date,
                booking_time_slots=order.booking_time_slots,
            )
            self._save(booking)
            logger.info(f"Booking reserved: {booking.id} (order {order_id})")
            return booking

    async def get_booking(self, booking_id: str) -> Booking:
        """Load a booking by id.

        Raises:
            BookingNotFoundError: If no such booking exists
        """
        document = self.storage.load_document(BOOKINGS, booking_id)
        if not document:
            raise BookingNotFoundError(booking_id)
        return Booking.model_validate(document)

    async def get_by_order_id(self, order_id: str) -> Booking:
        """Load the booking created for a gateway order.

        Raises:
            BookingNotFoundError: If no booking carries that order id
        """
        for booking in self._load_all():
            if booking.order_id == order_id:
                return booking
        raise BookingNotFoundError(order_id)

    async def list_user_bookings(self, user_id: str) -> List[Booking]:
        """List a user's bookings, newest first."""
        return [booking for booking in self._load_all() if booking.user_id == user_id]

    async def attach_payment_session(self, booking_id: str, payment_session_id: str) -> Booking:
        """Record the gateway payment session on a booking."""
        async with self._lock:
            booking = await self.get_booking(booking_id)
            booking.payment_session_id = payment_session_id
            return self._save(booking)

    async def update_status(self, booking_id: str, status: BookingStatus) -> Booking:
        """Move a booking to a new status.

        Returns:
            Updated booking
        """
        async with self._lock:
            booking = await self.get_booking(booking_id)
            if booking.status != status:
                logger.info(f"Booking {booking_id}: {booking.status.value} -> {status.value}")
                booking.status = status
                self._save(booking)
            return booking

    async def cancel_booking(self, booking_id: str) -> Booking:
        """Cancel a booking so it no longer blocks new ones."""
        return await self.update_status(booking_id, BookingStatus.CANCELLED)


# Global booking service instance
booking_service = BookingService()
