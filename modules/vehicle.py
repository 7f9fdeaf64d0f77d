import streamlit as st


def list_vehicles(store):
    """Fleet page, cheapest first."""
    st.subheader("Our Fleet")
    vehicles = sorted(store.fetch_vehicles(), key=lambda v: v.price_per_day)
    for vehicle in vehicles:
        cols = st.columns([1, 3, 1])
        with cols[0]:
            if vehicle.image_url and vehicle.image_url.startswith("http"):
                st.image(vehicle.image_url)
        with cols[1]:
            st.write(f"**{vehicle.name}** · {vehicle.type} · {vehicle.capacity} passengers · {vehicle.price_per_day} USD/day")
        with cols[2]:
            if st.button("Book Now", key=f"book_{vehicle.id}"):
                st.session_state['selected_vehicle_id'] = vehicle.id
                st.session_state['next_page'] = "Book"
                st.rerun()
