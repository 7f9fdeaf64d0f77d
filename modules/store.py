"""Booking data access: MongoDB first, local fallback cache when MongoDB is unavailable.

Every read falls back to the cache on BackendUnavailable. Writes fall back too,
except that a conflict found before the write is always raised to the caller.
"""
import datetime
import logging
import uuid

import pymongo
from bson import ObjectId
from pymongo.errors import PyMongoError

from errors import BackendUnavailable, ConflictError, NotFoundError, ValidationError, classify_backend_error
from models.booking_model import ACTIVE_STATUSES, BookingModel, BookingStatus
from models.vehicle_model import VehicleModel
from utils import is_iso_date, overlaps, to_iso_date

logger = logging.getLogger(__name__)

# Shown when MongoDB has no vehicles or cannot be reached
FALLBACK_VEHICLES = [
    VehicleModel(
        id="deepol-s05",
        name="Deepol S05",
        type="Electric SUV",
        capacity=4,
        price_per_day=45,
        image_url="/images/deepol-s05.jpg",
    ),
    VehicleModel(
        id="toyota-axio",
        name="Toyota Axio",
        type="Sedan",
        capacity=4,
        price_per_day=45,
        image_url="/images/toyota-axio.jpg",
    ),
    VehicleModel(
        id="toyota-hiace",
        name="Toyota HiAce",
        type="Van",
        capacity=12,
        price_per_day=60,
        image_url="/images/toyota-hiace.jpg",
    ),
]

ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_STATUSES]


def _now():
    return datetime.datetime.now(datetime.timezone.utc)


def _doc_id(value):
    """Bookings get ObjectIds from MongoDB; seeded vehicles use slugs."""
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


def _serialize_doc(doc):
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return doc


def _vehicle_from_doc(doc):
    return VehicleModel(**_serialize_doc(doc))


def _booking_from_doc(doc):
    return BookingModel(**_serialize_doc(doc))


def _remote(operation):
    """Run a MongoDB call, turning offline/permission errors into BackendUnavailable."""
    try:
        return operation()
    except PyMongoError as e:
        unavailable = classify_backend_error(e)
        if unavailable is None:
            raise
        raise unavailable from e


def validate_booking_payload(payload):
    if not payload.get("vehicle_id"):
        raise ValidationError("Missing vehicle_id.")
    start_date = to_iso_date(payload.get("start_date"))
    end_date = to_iso_date(payload.get("end_date"))
    if not start_date or not end_date:
        raise ValidationError("Missing start_date or end_date.")
    if not is_iso_date(start_date) or not is_iso_date(end_date):
        raise ValidationError("Dates must use the YYYY-MM-DD format.")
    if start_date > end_date:
        raise ValidationError("End date must be after start date.")
    return {**payload, "start_date": start_date, "end_date": end_date}


def find_conflict(bookings, start_date, end_date, exclude_booking_id=None):
    """First active booking overlapping the range, in the order given."""
    for booking in bookings:
        if exclude_booking_id is not None and booking.id == exclude_booking_id:
            continue
        if not booking.is_active:
            continue
        if overlaps(start_date, end_date, booking.start_date, booking.end_date):
            return booking
    return None


class BookingStore:
    def __init__(self, db, cache, fallback_vehicles=None):
        self.db = db
        self.cache = cache
        self.fallback_vehicles = fallback_vehicles if fallback_vehicles is not None else FALLBACK_VEHICLES

    # --- Vehicles ---

    def fetch_vehicles(self):
        """All active vehicles; the fallback catalog if MongoDB is empty or down."""
        try:
            docs = _remote(lambda: list(self.db.vehicles.find({"active": True})))
        except BackendUnavailable as e:
            logger.error(f"Error fetching vehicles (using fallback): {e}")
            return list(self.fallback_vehicles)
        if not docs:
            logger.warning("MongoDB returned no vehicles. Using fallback data.")
            return list(self.fallback_vehicles)
        return [_vehicle_from_doc(doc) for doc in docs]

    def fetch_vehicle_by_id(self, vehicle_id):
        doc = _remote(lambda: self.db.vehicles.find_one({"_id": _doc_id(vehicle_id)}))
        if not doc:
            logger.error(f"Vehicle not found: {vehicle_id}")
            raise NotFoundError(f"Vehicle not found: {vehicle_id}")
        return _vehicle_from_doc(doc)

    # --- Bookings ---

    def _cached_bookings(self, predicate):
        return [BookingModel(**record) for record in self.cache.load() if predicate(record)]

    def fetch_bookings_for_vehicle(self, vehicle_id):
        """PENDING and APPROVED bookings for one vehicle. Used for conflict checks."""
        try:
            docs = _remote(lambda: list(self.db.bookings.find({
                "vehicle_id": vehicle_id,
                "status": {"$in": ACTIVE_STATUS_VALUES}
            })))
            return [_booking_from_doc(doc) for doc in docs]
        except BackendUnavailable as e:
            logger.error(f"Error fetching vehicle bookings (using persistent fallback): {e}")
            return self._cached_bookings(
                lambda b: b.get("vehicle_id") == vehicle_id and b.get("status") in ACTIVE_STATUS_VALUES
            )

    def fetch_all_active_bookings(self):
        """PENDING and APPROVED bookings for every vehicle, in one query."""
        try:
            docs = _remote(lambda: list(self.db.bookings.find({"status": {"$in": ACTIVE_STATUS_VALUES}})))
            return [_booking_from_doc(doc) for doc in docs]
        except BackendUnavailable as e:
            logger.error(f"Error fetching all active bookings (using persistent fallback): {e}")
            return self._cached_bookings(lambda b: b.get("status") in ACTIVE_STATUS_VALUES)

    def fetch_bookings_by_status(self, status):
        """Newest first from MongoDB; insertion order from the fallback cache."""
        status = BookingStatus(status).value
        try:
            docs = _remote(lambda: list(
                self.db.bookings.find({"status": status}).sort("created_at", pymongo.DESCENDING)
            ))
            return [_booking_from_doc(doc) for doc in docs]
        except BackendUnavailable as e:
            logger.error(f"Error fetching bookings by status (using persistent fallback): {e}")
            return self._cached_bookings(lambda b: b.get("status") == status)

    def create_booking(self, payload):
        """Validate, check for conflicts and persist a PENDING booking. Returns the booking id."""
        payload = validate_booking_payload(dict(payload))
        payload.pop("id", None)

        existing = self.fetch_bookings_for_vehicle(payload["vehicle_id"])
        conflict = find_conflict(existing, payload["start_date"], payload["end_date"])
        if conflict:
            logger.warning(f"Booking conflict for vehicle {payload['vehicle_id']} with booking {conflict.id}")
            raise ConflictError(
                f"Selected dates are not available for this vehicle. "
                f"(Conflict with {conflict.status.value.lower()} booking)",
                conflict,
            )

        now = _now()
        booking_data = {
            **payload,
            "status": BookingStatus.PENDING.value,
            "created_at": now,
            "updated_at": now
        }
        try:
            booking_id = _remote(lambda: self.db.bookings.insert_one(dict(booking_data)).inserted_id)
        except BackendUnavailable as e:
            logger.error(f"Error creating booking (saving to fallback cache): {e}")
            record = {"id": f"mock-new-{uuid.uuid4().hex[:12]}", **booking_data}
            self.cache.append(record)
            return record["id"]
        logger.info(f"Booking {booking_id} created for vehicle {payload['vehicle_id']}.")
        return str(booking_id)

    def update_booking_status(self, booking_id, status, admin_note=""):
        """Move a PENDING booking to a final status.

        The write only applies while the stored record is still PENDING, so a
        caller holding an outdated copy cannot undo an earlier decision.
        """
        status = BookingStatus(status)
        now = _now()
        update_data = {
            "status": status.value,
            "admin_note": admin_note,
            "updated_at": now
        }
        if status == BookingStatus.APPROVED:
            update_data["approved_at"] = now

        current = None
        try:
            result = _remote(lambda: self.db.bookings.update_one(
                {"_id": _doc_id(booking_id), "status": BookingStatus.PENDING.value},
                {"$set": update_data}
            ))
            if result.matched_count == 0:
                current = _remote(lambda: self.db.bookings.find_one({"_id": _doc_id(booking_id)}, {"status": 1}))
        except BackendUnavailable as e:
            logger.error(f"Error updating booking status (trying fallback cache): {e}")
            record = self.cache.find(booking_id)
            if record is None:
                logger.error(f"Booking {booking_id} is not in the fallback cache either.")
                raise
            if record.get("status") != BookingStatus.PENDING.value:
                raise ValidationError(
                    f"Booking {booking_id} is already {record.get('status')} and cannot become {status.value}."
                )
            self.cache.update(booking_id, update_data)
            logger.info(f"Updated persistent mock booking {booking_id} to {status.value}.")
            return
        if result.matched_count == 0:
            if current is None:
                raise NotFoundError(f"Booking not found: {booking_id}")
            raise ValidationError(
                f"Booking {booking_id} is already {current.get('status')} and cannot become {status.value}."
            )
        logger.info(f"Booking {booking_id} set to {status.value}.")
