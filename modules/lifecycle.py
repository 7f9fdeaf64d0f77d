"""Booking status workflow.

PENDING -> APPROVED   only if no other active booking overlaps (re-checked at approval)
PENDING -> REJECTED   always
APPROVED and REJECTED are final.
"""
import logging

from errors import BookingError, ConflictError, Result, ValidationError
from models.booking_model import BookingStatus
from modules.availability import is_available

logger = logging.getLogger(__name__)

TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.APPROVED, BookingStatus.REJECTED},
    BookingStatus.APPROVED: set(),
    BookingStatus.REJECTED: set(),
}


def can_transition(current, target):
    return BookingStatus(target) in TRANSITIONS[BookingStatus(current)]


class BookingLifecycle:
    def __init__(self, store):
        self.store = store

    def create(self, payload):
        """New bookings always start PENDING; the store forces the status."""
        try:
            booking_id = self.store.create_booking(payload)
        except BookingError as e:
            logger.warning(f"Booking creation refused ({e.kind.value}): {e.message}")
            return Result.failure(e)
        return Result.success(booking_id)

    def _check_transition(self, booking, target):
        if not can_transition(booking.status, target):
            raise ValidationError(
                f"Booking {booking.id} is {booking.status.value} and cannot become {target.value}."
            )

    def approve(self, booking, admin_note=""):
        try:
            self._check_transition(booking, BookingStatus.APPROVED)
            availability = is_available(
                self.store, booking.vehicle_id, booking.start_date, booking.end_date,
                exclude_booking_id=booking.id
            )
            if not availability.available:
                conflict = availability.conflicting_booking
                raise ConflictError(f"Conflict detected! Overlaps with booking ID: {conflict.id}", conflict)
            self.store.update_booking_status(booking.id, BookingStatus.APPROVED, admin_note)
        except BookingError as e:
            logger.error(f"Approve error for booking {booking.id}: {e.message}")
            return Result.failure(e)
        logger.info(f"Booking {booking.id} approved.")
        return Result.success(booking.id)

    def reject(self, booking, admin_note=""):
        try:
            self._check_transition(booking, BookingStatus.REJECTED)
            self.store.update_booking_status(booking.id, BookingStatus.REJECTED, admin_note)
        except BookingError as e:
            logger.error(f"Reject error for booking {booking.id}: {e.message}")
            return Result.failure(e)
        logger.info(f"Booking {booking.id} rejected.")
        return Result.success(booking.id)
