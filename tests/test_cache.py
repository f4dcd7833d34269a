"""Tests for appointment day-view caching.

Run with: pytest tests/test_cache.py -v
"""

from datetime import date, datetime, timezone

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from workshop import cache as day_cache
from workshop.models import Appointment as AppointmentRow
from workshop.services import AppointmentService, OrderLifecycleManager
from workshop.stores.django_store import DjangoDataStore

DAY = date(2024, 3, 15)


def at(hour: int) -> datetime:
    return datetime(2024, 3, 15, hour, tzinfo=timezone.utc)


@pytest.fixture
def db_appointments(db, clock) -> AppointmentService:
    return AppointmentService(DjangoDataStore(), clock)


class TestCacheKeys:
    """Tests for generation-versioned keys."""

    def test_keys_embed_generation(self):
        assert day_cache.day_key(DAY) == "appointments:v1:day:2024-03-15"
        assert day_cache.days_key(DAY, date(2024, 3, 31)) == "appointments:v1:days:2024-03-15:2024-03-31"

    def test_invalidate_bumps_generation(self):
        before = day_cache.day_key(DAY)
        day_cache.invalidate_appointment_views()
        assert day_cache.day_key(DAY) != before

    def test_invalidate_without_generation_starts_at_two(self):
        cache.delete(day_cache.GENERATION_KEY)
        day_cache.invalidate_appointment_views()
        assert day_cache.day_key(DAY) == "appointments:v2:day:2024-03-15"


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on appointment changes."""

    def test_appointment_save_invalidates_day_views(self, db_appointments):
        before = day_cache.day_key(DAY)
        db_appointments.book("M1", at(9), at(10))
        assert day_cache.day_key(DAY) != before

    def test_store_update_invalidates_day_views(self, db_appointments):
        booked = db_appointments.book("M1", at(9), at(10))
        before = day_cache.day_key(DAY)
        db_appointments.reschedule(booked, start=at(11), end=at(12))
        assert day_cache.day_key(DAY) != before

    def test_appointment_delete_invalidates_day_views(self, db_appointments):
        booked = db_appointments.book("M1", at(9), at(10))
        before = day_cache.day_key(DAY)
        AppointmentRow.objects.filter(pk=booked.id).delete()
        assert day_cache.day_key(DAY) != before

    def test_order_changes_keep_day_views(self, clock):
        before = day_cache.day_key(DAY)
        OrderLifecycleManager(DjangoDataStore(), clock).open_order()
        assert day_cache.day_key(DAY) == before

    def test_day_view_reflects_new_booking(self, api_client: APIClient, db_appointments):
        db_appointments.book("M1", at(9), at(10))
        first = api_client.get("/api/appointments/day/2024-03-15").json()
        assert cache.get(day_cache.day_key(DAY)) == first
        db_appointments.book("M2", at(9), at(10))
        second = api_client.get("/api/appointments/day/2024-03-15").json()
        assert [a["resourceId"] for a in second] == ["M1", "M2"]
