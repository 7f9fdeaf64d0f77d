import datetime
import logging

import streamlit as st
from pydantic import ValidationError as PydanticValidationError

from config import BOOKING_TIMEOUT_SECONDS, WHATSAPP_NUMBER
from errors import ErrorKind
from models.booking_model import BookingRequest
from modules.availability import availability_map
from modules.submission import handoff, submit_booking
from utils import calculate_total_price, sanitize_input, to_iso_date

logger = logging.getLogger(__name__)

# Suggestions for pick-up and drop-off
LOCATIONS = [
    "Colombo",
    "Bandaranaike International Airport",
    "Negombo",
    "Kandy",
    "Sigiriya",
    "Dambulla",
    "Nuwara Eliya",
    "Ella",
    "Yala",
    "Galle",
    "Mirissa",
    "Matara",
    "Trincomalee",
    "Jaffna",
]


def build_booking_payload(form, vehicle):
    """Turn the form fields into a booking request; price comes from the vehicle rate."""
    start_date = to_iso_date(form["start_date"])
    end_date = to_iso_date(form["end_date"])
    price = calculate_total_price(start_date, end_date, vehicle.price_per_day) if vehicle else 0
    return BookingRequest(
        vehicle_id=form["vehicle_id"],
        vehicle_name=vehicle.name if vehicle else "Unknown",
        start_date=start_date,
        end_date=end_date,
        pickup_location=sanitize_input(form.get("pickup_location")),
        dropoff_location=sanitize_input(form.get("dropoff_location")),
        customer_name=sanitize_input(form.get("customer_name")),
        customer_email=form.get("customer_email"),
        phone_number=sanitize_input(form.get("phone_number")),
        notes=sanitize_input(form.get("notes")) or None,
        total_price=price
    )


def _vehicle_label(vehicle, availability):
    if availability.available:
        return vehicle.name
    return f"{vehicle.name} ({availability.reason})"


def _open_link(url):
    st.link_button("Open WhatsApp", url)


# Booking form page
def booking_form(store, lifecycle, vehicle_id=None):
    st.header("Book Your Journey")

    vehicles = sorted(store.fetch_vehicles(), key=lambda v: v.price_per_day)
    active_bookings = store.fetch_all_active_bookings()
    if not vehicles:
        st.error("No vehicles are available right now.")
        return

    today = datetime.date.today()
    start_date = st.date_input("Pick-up Date", today, min_value=today)
    end_date = st.date_input("Drop-off Date", start_date, min_value=start_date)
    availability = availability_map(vehicles, active_bookings, to_iso_date(start_date), to_iso_date(end_date))

    by_id = {v.id: v for v in vehicles}
    ids = [v.id for v in vehicles if availability[v.id].available]
    booked = [v for v in vehicles if not availability[v.id].available]

    if vehicle_id in by_id and vehicle_id not in ids:
        st.warning(f"{by_id[vehicle_id].name} is not available for these dates. {availability[vehicle_id].reason}")
    if booked:
        st.caption("Not available: " + ", ".join(_vehicle_label(v, availability[v.id]) for v in booked))
    if not ids:
        st.error("No vehicles are available for the selected dates.")
        return
    index = ids.index(vehicle_id) if vehicle_id in ids else 0

    with st.form(key="booking_form"):
        selected_id = st.selectbox(
            "Select Vehicle", ids, index=index,
            format_func=lambda vid: by_id[vid].name
        )
        pickup_location = st.selectbox("Pick-up Location", LOCATIONS)
        dropoff_location = st.selectbox("Drop-off Location", LOCATIONS)
        customer_name = st.text_input("Full Name")
        customer_email = st.text_input("Email Address")
        phone_number = st.text_input("Phone Number")
        notes = st.text_area("Special Requests (Optional)")
        submit = st.form_submit_button("Confirm Booking")

    if not submit:
        return

    vehicle = by_id.get(selected_id)
    try:
        request = build_booking_payload({
            "vehicle_id": selected_id,
            "start_date": start_date,
            "end_date": end_date,
            "pickup_location": pickup_location,
            "dropoff_location": dropoff_location,
            "customer_name": customer_name,
            "customer_email": customer_email,
            "phone_number": phone_number,
            "notes": notes
        }, vehicle)
    except PydanticValidationError as e:
        st.error("Please check the form: " + "; ".join(err["msg"] for err in e.errors()))
        return

    payload = request.model_dump()
    with st.spinner("Saving Booking..."):
        outcome = submit_booking(lifecycle.create, payload, BOOKING_TIMEOUT_SECONDS)

    if outcome.kind in (ErrorKind.VALIDATION, ErrorKind.CONFLICT):
        st.error(outcome.error.message)
        return

    url = handoff(outcome, payload, WHATSAPP_NUMBER, _open_link)
    st.success("Booking Confirmed! Our team will contact you shortly to confirm the process.")
    logger.info(f"Booking flow finished: {outcome!r}, hand-off {url is not None}")
