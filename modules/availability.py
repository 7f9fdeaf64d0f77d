import logging

from modules.store import find_conflict

logger = logging.getLogger(__name__)


class Availability:
    def __init__(self, available, conflicting_booking=None):
        self.available = available
        self.conflicting_booking = conflicting_booking

    @property
    def reason(self):
        if self.conflicting_booking is None:
            return None
        return f"Booked until {self.conflicting_booking.end_date}"

    def __bool__(self):
        return self.available


# Check whether a vehicle is free for the inclusive date range
def is_available(store, vehicle_id, start_date, end_date, exclude_booking_id=None):
    """Ask the store for the vehicle's active bookings and report the first overlap.

    exclude_booking_id lets a booking be re-checked against everything except itself,
    which is what approval needs.
    """
    bookings = store.fetch_bookings_for_vehicle(vehicle_id)
    conflict = find_conflict(bookings, start_date, end_date, exclude_booking_id)
    if conflict:
        logger.info(f"Vehicle {vehicle_id} unavailable {start_date}..{end_date}: overlaps booking {conflict.id}")
        return Availability(False, conflict)
    return Availability(True)


def vehicle_availability(active_bookings, vehicle_id, start_date, end_date):
    """Same check against a list already fetched with fetch_all_active_bookings."""
    if not start_date or not end_date:
        return Availability(True)
    bookings = [b for b in active_bookings if b.vehicle_id == vehicle_id]
    conflict = find_conflict(bookings, start_date, end_date)
    return Availability(conflict is None, conflict)


def availability_map(vehicles, active_bookings, start_date, end_date):
    """Availability for every vehicle in the booking form's dropdown."""
    return {
        vehicle.id: vehicle_availability(active_bookings, vehicle.id, start_date, end_date)
        for vehicle in vehicles
    }
