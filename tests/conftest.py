import copy
import itertools
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_db
from app.core.errors import RemoteCallError
from app.core.security import get_session_context
from app.main import app
from app.services.session_context import SessionContext

ADMIN_TOKEN = "admin-token"
CUSTOMER_TOKEN = "customer-token"
ADMIN_ID = "user-admin"
CUSTOMER_ID = "user-customer"


class FakeDB:
    """In-memory stand-in for DBService with the same async surface."""

    def __init__(self):
        self.services = {}
        self.bookings = {}
        self.profiles = {}
        self.roles = set()
        self.users = {}
        self.signed_out = []
        self.fail = set()
        self._ids = itertools.count(1)
        self._clock = datetime(2026, 1, 1, 9, 0, 0)

    def _check(self, name):
        if name in self.fail:
            raise RemoteCallError()

    async def get_client(self):
        return None

    async def get_user(self, access_token):
        self._check("get_user")
        return copy.deepcopy(self.users.get(access_token))

    async def sign_out(self, access_token):
        self._check("sign_out")
        self.signed_out.append(access_token)
        self.users.pop(access_token, None)

    async def has_role(self, user_id, role):
        self._check("has_role")
        return (user_id, role) in self.roles

    async def list_active_services(self):
        self._check("list_active_services")
        rows = [s for s in self.services.values() if s["is_active"]]
        return copy.deepcopy(sorted(rows, key=lambda s: s["price_per_kg"]))

    async def get_service(self, service_id):
        self._check("get_service")
        return copy.deepcopy(self.services.get(service_id))

    def _with_service(self, row):
        service = self.services.get(row["service_id"], {})
        out = copy.deepcopy(row)
        out["services"] = {"name": service.get("name", "?"), "turnaround_days": service.get("turnaround_days")}
        return out

    async def insert_booking(self, row):
        self._check("insert_booking")
        booking_id = f"booking-{next(self._ids)}"
        self._clock += timedelta(minutes=1)
        stored = {**row, "id": booking_id, "created_at": self._clock.isoformat()}
        self.bookings[booking_id] = stored
        return copy.deepcopy(stored)

    async def get_booking(self, booking_id):
        self._check("get_booking")
        row = self.bookings.get(booking_id)
        return self._with_service(row) if row else None

    async def list_bookings_for_user(self, user_id):
        self._check("list_bookings_for_user")
        rows = [b for b in self.bookings.values() if b["user_id"] == user_id]
        rows.sort(key=lambda b: b["created_at"], reverse=True)
        return [self._with_service(b) for b in rows]

    async def list_all_bookings(self):
        self._check("list_all_bookings")
        rows = sorted(self.bookings.values(), key=lambda b: b["created_at"], reverse=True)
        return [self._with_service(b) for b in rows]

    async def update_booking_status(self, booking_id, status):
        self._check("update_booking_status")
        row = self.bookings.get(booking_id)
        if not row:
            return None
        row["status"] = status
        return copy.deepcopy(row)

    async def get_profile(self, user_id):
        self._check("get_profile")
        return copy.deepcopy(self.profiles.get(user_id))

    async def get_profiles(self, user_ids):
        self._check("get_profiles")
        return [copy.deepcopy(self.profiles[i]) for i in user_ids if i in self.profiles]


def make_service(service_id, name, price, min_weight=1, turnaround_days=2, is_active=True):
    return {
        "id": service_id,
        "name": name,
        "type": "wash",
        "description": f"{name} service",
        "price_per_kg": price,
        "min_weight": min_weight,
        "turnaround_days": turnaround_days,
        "is_active": is_active,
    }


@pytest.fixture
def fake_db():
    db = FakeDB()
    for row in (
        make_service("svc-iron", "Ironing", 150, min_weight=1, turnaround_days=1),
        make_service("svc-wash", "Wash & Fold", 40, min_weight=3, turnaround_days=2),
        make_service("svc-dry", "Dry Clean", 60, min_weight=2.5, turnaround_days=3),
        make_service("svc-old", "Retired Steam", 10, is_active=False),
    ):
        db.services[row["id"]] = row
    db.users[ADMIN_TOKEN] = {"id": ADMIN_ID, "email": "admin@example.com"}
    db.users[CUSTOMER_TOKEN] = {"id": CUSTOMER_ID, "email": "customer@example.com"}
    db.roles.add((ADMIN_ID, "admin"))
    db.profiles[CUSTOMER_ID] = {
        "id": CUSTOMER_ID,
        "full_name": "Asha Rao",
        "phone": "+91 98765 43210",
        "address": "12 MG Road, Bengaluru 560001",
    }
    return db


@pytest.fixture
def session_ctx(fake_db):
    return SessionContext(fake_db)


@pytest.fixture
def client(fake_db, session_ctx):
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_session_context] = lambda: session_ctx
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def customer_headers():
    return {"Authorization": f"Bearer {CUSTOMER_TOKEN}"}
