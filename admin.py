import streamlit as st
import pandas as pd
import requests
from supabase import create_client

from app.core.config import settings
from app.models.db_models import BookingStatus

STATUSES = [s.value for s in BookingStatus]
TIMEOUT = 10


class AdminPanelError(Exception):
    """Message meant for st.error."""


def _headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _message(response: requests.Response, fallback: str) -> str:
    try:
        return response.json().get("message") or fallback
    except ValueError:
        return fallback


def sign_in(email: str, password: str) -> str:
    """Signs in against Supabase auth and returns the access token for the API."""
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        raise AdminPanelError("Supabase is not configured.")
    client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    try:
        response = client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception:
        raise AdminPanelError("Sign in failed. Check your email and password.")
    if not response.session:
        raise AdminPanelError("Sign in failed. Check your email and password.")
    return response.session.access_token


def sign_out(token: str):
    requests.post(f"{settings.API_BASE_URL}/auth/logout", headers=_headers(token), timeout=TIMEOUT)


def fetch_bookings(token: str) -> list:
    response = requests.get(f"{settings.API_BASE_URL}/admin/bookings", headers=_headers(token), timeout=TIMEOUT)
    if response.status_code != 200:
        raise AdminPanelError(_message(response, "Failed to load bookings"))
    return response.json().get("bookings", [])


def update_status(token: str, booking_id: str, status: str) -> dict:
    response = requests.patch(
        f"{settings.API_BASE_URL}/admin/bookings/{booking_id}/status",
        json={"status": status},
        headers=_headers(token),
        timeout=TIMEOUT,
    )
    if response.status_code != 200:
        raise AdminPanelError(_message(response, "Failed to update booking status"))
    return response.json()


def status_key(booking_id: str) -> str:
    return f"status_{booking_id}"


def on_status_change(token: str, booking_id: str, current: str, state=None):
    """
    Dropdown callback: sends one PATCH for the selected status. A rejected
    change puts the dropdown back on the stored status so it is not resent.
    """
    state = st.session_state if state is None else state
    key = status_key(booking_id)
    try:
        update_status(token, booking_id, state[key])
        state["flash"] = ("success", "Booking status updated successfully")
    except AdminPanelError as e:
        state[key] = current
        state["flash"] = ("error", str(e))


def bookings_to_frame(bookings: list) -> pd.DataFrame:
    """Flattens the admin booking list (embedded service and profile) into table rows."""
    rows = []
    for b in bookings:
        profile = b.get("profile") or {}
        service = b.get("services") or {}
        rows.append({
            "id": b.get("id"),
            "service": service.get("name"),
            "customer": profile.get("full_name"),
            "phone": profile.get("phone"),
            "weight_kg": float(b["weight_kg"]) if b.get("weight_kg") is not None else None,
            "total_price": float(b["total_price"]) if b.get("total_price") is not None else None,
            "pickup_address": b.get("pickup_address"),
            "pickup_date": b.get("pickup_date"),
            "status": b.get("status"),
            "created_at": pd.to_datetime(b.get("created_at")) if b.get("created_at") else None,
        })
    return pd.DataFrame(rows, columns=[
        "id", "service", "customer", "phone", "weight_kg", "total_price",
        "pickup_address", "pickup_date", "status", "created_at",
    ])


def main():
    st.set_page_config(page_title="Laundry Admin", page_icon="🧺", layout="wide")
    st.title("Laundry Pickup - Admin Panel")

    token = st.session_state.get("access_token")

    if not token:
        with st.form("login"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Sign in"):
                try:
                    st.session_state["access_token"] = sign_in(email, password)
                    st.rerun()
                except AdminPanelError as e:
                    st.error(str(e))
        return

    flash = st.session_state.pop("flash", None)
    if flash:
        kind, text = flash
        (st.success if kind == "success" else st.error)(text)

    col_refresh, col_logout = st.columns([1, 1])
    if col_refresh.button("Refresh"):
        st.rerun()
    if col_logout.button("Sign out"):
        sign_out(token)
        st.session_state.pop("access_token", None)
        st.rerun()

    try:
        bookings = fetch_bookings(token)
    except AdminPanelError as e:
        # Non-admins are sent back to the login form
        st.error(str(e))
        st.session_state.pop("access_token", None)
        return

    if not bookings:
        st.info("No bookings yet. Bookings will appear here once customers start placing orders.")
        return

    df = bookings_to_frame(bookings)

    col1, col2, col3 = st.columns(3)
    col1.metric("Total bookings", len(df))
    col2.metric("Pending", int((df["status"] == BookingStatus.PENDING.value).sum()))
    col3.metric("Revenue", f"{settings.CURRENCY_SYMBOL}{df['total_price'].sum():.2f}")

    st.subheader("All bookings")
    st.dataframe(
        df,
        use_container_width=True,
        column_config={
            "created_at": st.column_config.DatetimeColumn("Booked", format="D.M.YYYY HH:mm"),
            "pickup_date": "Pickup",
            "weight_kg": "Weight (kg)",
            "total_price": "Total",
            "status": "Status",
        },
    )

    st.subheader("Update status")
    for b in bookings:
        current = b.get("status")
        key = status_key(b["id"])
        # Widget shows what the API last returned, not a leftover selection
        st.session_state[key] = current
        label = f"{(b.get('services') or {}).get('name', 'Service')} - {(b.get('profile') or {}).get('full_name', 'Unknown')}"
        st.selectbox(label, STATUSES, key=key, on_change=on_status_change, args=(token, b["id"], current))

    st.markdown("---")
    st.caption("Laundry Pickup Booking • Admin")


if __name__ == "__main__":
    main()
