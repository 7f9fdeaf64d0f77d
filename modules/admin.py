import streamlit as st

from models.booking_model import BookingStatus
from modules.lifecycle import can_transition


def _booking_details(booking):
    st.write(f"**Customer:** {booking.customer_name} ({booking.customer_email}, {booking.phone_number})")
    st.write(f"**Journey:** {booking.pickup_location} → {booking.dropoff_location}")
    st.write(f"**Total:** {booking.total_price} USD")
    st.write(f"**Notes:** {booking.notes or 'None'}")
    if booking.admin_note:
        st.write(f"**Admin note:** {booking.admin_note}")


def admin_dashboard(store, lifecycle):
    st.subheader("Admin Dashboard")
    st.caption("Manage bookings and reservations")

    statuses = [s.value for s in BookingStatus]
    status = st.radio("Status", statuses, horizontal=True, key="admin_status",
                      format_func=lambda s: s.capitalize())

    bookings = store.fetch_bookings_by_status(status)
    if not bookings:
        st.write(f"No {status.lower()} bookings")
        return

    for booking in bookings:
        with st.expander(f"{booking.vehicle_name} · {booking.start_date} → {booking.end_date}"):
            _booking_details(booking)
            if not can_transition(booking.status, BookingStatus.APPROVED):
                continue

            admin_note = st.text_input("Admin note", key=f"note_{booking.id}")
            col1, col2 = st.columns(2)
            with col1:
                if st.button("Approve", key=f"approve_{booking.id}"):
                    result = lifecycle.approve(booking, admin_note)
                    if result.ok:
                        st.success("Booking approved successfully")
                        st.rerun()
                    else:
                        st.error(result.message)
            with col2:
                if st.button("Reject", key=f"reject_{booking.id}"):
                    result = lifecycle.reject(booking, admin_note)
                    if result.ok:
                        st.success("Booking rejected successfully")
                        st.rerun()
                    else:
                        st.error(result.message)
