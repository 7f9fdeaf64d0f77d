import datetime

import pytest
from pydantic import ValidationError

from modules.booking import build_booking_payload
from modules.store import FALLBACK_VEHICLES
from utils import calculate_total_price, rental_days, sanitize_input

AXIO = next(v for v in FALLBACK_VEHICLES if v.id == "toyota-axio")


def form(**overrides):
    data = {
        "vehicle_id": "toyota-axio",
        "start_date": datetime.date(2026, 7, 1),
        "end_date": datetime.date(2026, 7, 5),
        "pickup_location": "Kandy",
        "dropoff_location": "Colombo",
        "customer_name": "Jane Smith",
        "customer_email": "jane@example.com",
        "phone_number": "+94 71 987 6543",
        "notes": ""
    }
    data.update(overrides)
    return data


def test_same_day_rental_charges_one_day():
    assert rental_days("2026-06-01", "2026-06-01") == 1
    assert calculate_total_price("2026-06-01", "2026-06-01", 45.0) == 45.0


def test_multi_day_price():
    assert rental_days("2026-07-01", "2026-07-05") == 4
    assert calculate_total_price("2026-07-01", "2026-07-05", 45.0) == 180.0


def test_build_booking_payload():
    request = build_booking_payload(form(), AXIO)

    assert request.vehicle_name == "Toyota Axio"
    assert request.start_date == "2026-07-01"
    assert request.end_date == "2026-07-05"
    assert request.total_price == 180.0
    assert request.notes is None


def test_build_booking_payload_unknown_vehicle():
    request = build_booking_payload(form(vehicle_id="ghost"), None)

    assert request.vehicle_name == "Unknown"
    assert request.total_price == 0


def test_build_booking_payload_rejects_reversed_dates():
    with pytest.raises(ValidationError):
        build_booking_payload(form(start_date=datetime.date(2026, 7, 6)), AXIO)


def test_build_booking_payload_rejects_bad_email():
    with pytest.raises(ValidationError):
        build_booking_payload(form(customer_email="not-an-email"), AXIO)


def test_build_booking_payload_sanitizes_text():
    request = build_booking_payload(form(notes="<b>Child seat</b> & cooler"), AXIO)

    assert request.notes == "Child seat &amp; cooler"
    assert sanitize_input(None) == ""
