import streamlit as st
st.set_page_config(page_title="CeylonExplorer Vehicle Booking", layout="wide")

import logging

from config import db, LOCAL_DB_PATH, SECRET_KEY
from local_storage import BookingCache, SqliteStorage, is_mongodb_connected
from modules.admin import admin_dashboard
from modules.auth import admin_login, current_admin_id
from modules.booking import booking_form
from modules.lifecycle import BookingLifecycle
from modules.store import BookingStore
from modules.vehicle import list_vehicles

logger = logging.getLogger(__name__)

PAGES = ["Vehicles", "Book", "Admin"]


@st.cache_resource
def get_store():
    cache = BookingCache(SqliteStorage(LOCAL_DB_PATH))
    return BookingStore(db, cache)


def main():
    st.title("CeylonExplorer")

    if not is_mongodb_connected(db):
        st.warning("Booking service is running in offline mode. Requests are kept on this device only.")

    store = get_store()
    lifecycle = BookingLifecycle(store)

    # The radio owns 'page' once drawn; other pages ask for a switch through 'next_page'
    if 'next_page' in st.session_state:
        st.session_state['page'] = st.session_state.pop('next_page')
    if st.session_state.get('page') not in PAGES:
        st.session_state['page'] = PAGES[0]
    choice = st.sidebar.radio("Menu", PAGES, key="page")

    if choice == "Vehicles":
        list_vehicles(store)
    elif choice == "Book":
        booking_form(store, lifecycle, st.session_state.get('selected_vehicle_id'))
    elif choice == "Admin":
        if current_admin_id(db, SECRET_KEY):
            admin_dashboard(store, lifecycle)
            if st.sidebar.button("Logout"):
                st.session_state.pop('admin_token', None)
                st.rerun()
        else:
            admin_login(db, SECRET_KEY)


if __name__ == '__main__':
    main()
