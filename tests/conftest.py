"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from workshop.services import AppointmentService, OrderLifecycleManager
from workshop.stores import Clock, InMemoryDataStore


class FixedClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> InMemoryDataStore:
    return InMemoryDataStore()


@pytest.fixture
def orders(store, clock) -> OrderLifecycleManager:
    return OrderLifecycleManager(store, clock)


@pytest.fixture
def appointments(store, clock) -> AppointmentService:
    return AppointmentService(store, clock)
