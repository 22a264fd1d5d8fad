"""Shared fixtures for the availability service tests."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from availability_api.app.main import create_app
from availability_api.app.schemas.time_slot import TimeSlot
from availability_api.app.services.slot_store import InMemorySlotStore


# Fixed point far enough in the future that "now" never catches up.
BASE = datetime(2099, 1, 1, 9, 0, tzinfo=timezone.utc)


def slot(start_offset_hours: float, duration_hours: float) -> TimeSlot:
    """Build a slot relative to ``BASE``."""
    return TimeSlot(
        start=BASE + timedelta(hours=start_offset_hours),
        duration=timedelta(hours=duration_hours),
    )


@pytest.fixture()
def store() -> InMemorySlotStore:
    return InMemorySlotStore()


@pytest.fixture()
def app(store):
    return create_app(store=store)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
