import datetime
import itertools

import mongomock
import pytest

from local_storage import BookingCache, MemoryStorage
from models.booking_model import BookingModel
from modules.availability import availability_map, is_available, vehicle_availability
from modules.store import BookingStore, FALLBACK_VEHICLES
from utils import overlaps


@pytest.fixture
def store():
    db = mongomock.MongoClient()['test_database']
    return BookingStore(db, BookingCache(MemoryStorage(), seed=None))


def insert_booking(store, vehicle_id, start, end, status):
    return str(store.db.bookings.insert_one({
        "vehicle_id": vehicle_id,
        "vehicle_name": "Toyota Axio",
        "start_date": start,
        "end_date": end,
        "status": status,
        "total_price": 100.0,
        "created_at": datetime.datetime.now()
    }).inserted_id)


def booking(booking_id, start, end, vehicle_id="toyota-axio", status="PENDING"):
    return BookingModel(id=booking_id, vehicle_id=vehicle_id, start_date=start, end_date=end, status=status)


def test_overlaps_shared_boundary_day():
    assert overlaps("2026-06-01", "2026-06-05", "2026-06-05", "2026-06-10")


def test_overlaps_adjacent_ranges_do_not_overlap():
    assert not overlaps("2026-06-01", "2026-06-05", "2026-06-06", "2026-06-10")


def test_overlaps_containment():
    assert overlaps("2026-06-01", "2026-06-30", "2026-06-10", "2026-06-12")
    assert overlaps("2026-06-10", "2026-06-12", "2026-06-01", "2026-06-30")


def test_overlaps_is_symmetric():
    dates = ["2026-05-31", "2026-06-01", "2026-06-05", "2026-06-06", "2026-07-01"]
    ranges = [(a, b) for a, b in itertools.product(dates, repeat=2) if a <= b]
    for (a1, a2), (b1, b2) in itertools.product(ranges, repeat=2):
        assert overlaps(a1, a2, b1, b2) == overlaps(b1, b2, a1, a2)


def test_rejected_booking_never_conflicts(store):
    insert_booking(store, "toyota-axio", "2026-06-01", "2026-06-10", "REJECTED")

    result = is_available(store, "toyota-axio", "2026-06-03", "2026-06-05")

    assert result.available
    assert result.conflicting_booking is None


def test_pending_booking_conflicts(store):
    booking_id = insert_booking(store, "toyota-axio", "2026-06-01", "2026-06-10", "PENDING")

    result = is_available(store, "toyota-axio", "2026-06-10", "2026-06-12")

    assert not result.available
    assert result.conflicting_booking.id == booking_id
    assert result.reason == "Booked until 2026-06-10"


def test_other_vehicle_does_not_conflict(store):
    insert_booking(store, "toyota-hiace", "2026-06-01", "2026-06-10", "APPROVED")

    assert is_available(store, "toyota-axio", "2026-06-03", "2026-06-05").available


def test_excluded_booking_is_ignored(store):
    booking_id = insert_booking(store, "toyota-axio", "2026-06-01", "2026-06-10", "PENDING")

    result = is_available(store, "toyota-axio", "2026-06-01", "2026-06-10", exclude_booking_id=booking_id)

    assert result.available


def test_vehicle_availability_without_dates_is_available():
    active = [booking("b1", "2026-06-01", "2026-06-10")]

    assert vehicle_availability(active, "toyota-axio", "", "2026-06-05").available
    assert vehicle_availability(active, "toyota-axio", "2026-06-05", None).available


def test_vehicle_availability_returns_first_match():
    active = [
        booking("b1", "2026-06-08", "2026-06-09"),
        booking("b2", "2026-06-01", "2026-06-03"),
    ]

    result = vehicle_availability(active, "toyota-axio", "2026-06-01", "2026-06-10")

    assert result.conflicting_booking.id == "b1"


def test_availability_map_covers_every_vehicle():
    active = [booking("b1", "2026-06-01", "2026-06-10", vehicle_id="deepol-s05")]

    result = availability_map(FALLBACK_VEHICLES, active, "2026-06-05", "2026-06-06")

    assert set(result) == {"deepol-s05", "toyota-axio", "toyota-hiace"}
    assert not result["deepol-s05"].available
    assert result["toyota-axio"].available
    assert result["toyota-hiace"].available
