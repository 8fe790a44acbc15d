"""Pytest configuration and fixtures for table booking tests."""
import pytest
from datetime import date, datetime, time
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from core.restaurant_config import RestaurantConfig, TimeRange
from core.utils_datetime import TIMEZONE
from db import drop_db, init_db
from db.session import create_session_factory
from domain.enums import DayOfWeek
from domain.models import Booking, Duration, Table
from services.store import InMemoryReservationStore


OPEN_DAYS = [
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
]


@pytest.fixture(scope="function")
def fixed_now():
    """Monday 2025-03-10 08:00 restaurant time."""
    return TIMEZONE.localize(datetime(2025, 3, 10, 8, 0))


@pytest.fixture(scope="function")
def clock(fixed_now):
    """Injected clock returning a fixed 'now'."""
    return lambda: fixed_now


@pytest.fixture(scope="function")
def booking_day():
    """A Friday a few days after fixed_now."""
    return date(2025, 3, 14)


@pytest.fixture(scope="function")
def sunday():
    """The Sunday after booking_day; the sample restaurant is closed."""
    return date(2025, 3, 16)


@pytest.fixture(scope="function")
def make_config():
    """Factory for a restaurant open 09:00-22:00 Monday to Saturday."""
    def _make(**overrides):
        values = {
            "id": "r1",
            "name": "Test Bistro",
            "regular_hours": {
                day: TimeRange(open_time=time(9, 0), close_time=time(22, 0))
                for day in OPEN_DAYS
            },
            "default_duration": Duration(hours=1, minutes=30),
        }
        values.update(overrides)
        return RestaurantConfig(**values)
    return _make


@pytest.fixture(scope="function")
def restaurant_config(make_config):
    return make_config()


@pytest.fixture(scope="function")
def make_booking(booking_day):
    """Factory for an existing booking on booking_day."""
    counter = {"n": 0}

    def _make(table_id="t1", start="12:00", end="13:30", **kwargs):
        counter["n"] += 1
        values = {
            "id": f"b{counter['n']}",
            "table_id": table_id,
            "booking_date": booking_day,
            "booking_time": start,
            "expected_end_time": end,
            "party_size": 2,
        }
        values.update(kwargs)
        return Booking(**values)
    return _make


@pytest.fixture(scope="function")
def make_store(make_config):
    """Factory for an in-memory store holding one restaurant."""
    def _make(tables=None, bookings=None, config=None):
        store = InMemoryReservationStore()
        store.add_restaurant(
            config or make_config(),
            tables if tables is not None else [Table(id="t1", capacity=4)],
            bookings or [],
        )
        return store
    return _make


@pytest.fixture(scope="function")
def store(make_store):
    return make_store()


@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory bound to the test engine."""
    return create_session_factory(db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a database session for testing."""
    session = session_factory()
    yield session
    session.close()
