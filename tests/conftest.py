"""
Pytest configuration and shared fixtures
"""
import os

os.environ["DISPLAY_TIMEZONE"] = "UTC"
os.environ["ENFORCE_PRICING"] = "False"

import asyncio
import random
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from frontdesk.config.database import db_config, Collections, ensure_indexes
from frontdesk.database.db_operations import db_ops
from frontdesk.main import app
from frontdesk.services.booking_engine import BookingEngine, build_booking_engine
from frontdesk.services.registry import BookingStore, GuestDirectory, RoomRegistry
from frontdesk.utils.auth import create_access_token

NOW = datetime(2026, 3, 10, 12, 0)
CHECK_IN = datetime(2026, 3, 10, 14, 0)

STANDARD_PRICING = {"hourly3": 150, "hourly8": 400, "hourly12": 600, "daily": 1200}

GUEST = {
    "first_name": "Maria",
    "last_name": "Santos",
    "phone": "555-0101",
    "id_type": "Passport",
    "id_number": "P1234567",
}


def run(coro):
    """Drive a coroutine to completion from a synchronous test"""
    return asyncio.run(coro)


# ============== Database ==============

@pytest.fixture(scope="function")
def db():
    """Fresh in-memory Mongo database per test"""
    db_config.use_client(AsyncMongoMockClient(), "frontdesk_test")
    run(ensure_indexes())
    yield db_config.database
    db_config.client = None
    db_config.database = None


@pytest.fixture
def room_type(db):
    return run(db_ops.create(Collections.ROOM_TYPES, {
        "name": "Standard",
        "description": "Basic room with essential amenities",
        "base_capacity": 2,
        "pricing": dict(STANDARD_PRICING),
        "penalty": 200,
        "is_active": True,
    }))


def make_room(room_type, number="101", status="Available", floor=1):
    return run(db_ops.create(Collections.ROOMS, {
        "room_number": number,
        "room_type_id": str(room_type["_id"]),
        "floor": floor,
        "status": status,
        "description": "Standard room",
        "telephone": number,
        "is_active": True,
    }))


@pytest.fixture
def room(room_type):
    return make_room(room_type)


def get_room(room):
    return run(db_ops.get_by_id(Collections.ROOMS, str(room["_id"])))


def set_room_status(room, status):
    return run(db_ops.update(Collections.ROOMS, str(room["_id"]), {"status": status}))


# ============== Engine ==============

@pytest.fixture
def engine(db):
    """Booking engine on a fixed clock"""
    return BookingEngine(
        bookings=BookingStore(),
        rooms=RoomRegistry(),
        guests=GuestDirectory(),
        clock=lambda: NOW,
        rng=random.Random(7),
    )


def booking_data(room, **overrides):
    data = {
        "guest": dict(GUEST),
        "room_id": str(room["_id"]),
        "check_in_date": CHECK_IN,
        "duration": 24,
        "guest_count": 1,
        "total_amount": 1200.0,
        "paid_amount": 0,
        "payment_method": "Cash",
        "booking_status": "Confirmed",
        "special_requests": None,
        "additional_services": [],
        "discounts": [],
        "notes": None,
    }
    data.update(overrides)
    return data


# ============== API ==============

@pytest.fixture
def client(db):
    """Test client; the lifespan is skipped so the mock database stays attached"""
    app.state.booking_engine = build_booking_engine()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token = create_access_token({"sub": "admin-1", "name": "Hotel Admin", "role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    token = create_access_token({"sub": "staff-1", "name": "Front Desk", "role": "user"})
    return {"Authorization": f"Bearer {token}"}
