"""Appointment conflict detection and day-level queries.

All interval logic uses the half-open rule: an appointment ending at 11:00
does not collide with one starting at 11:00.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable

from workshop.domain.errors import ValidationError
from workshop.domain.models import Appointment, AppointmentStatus
from workshop.domain.value_objects import TimeInterval


@dataclass(frozen=True)
class Candidate:
    """Time range requested for a resource."""

    resource_id: str
    start: datetime
    end: datetime

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.start, self.end)


def _ensure_comparable(first: datetime, second: datetime, field: str) -> None:
    if (first.tzinfo is None) != (second.tzinfo is None):
        raise ValidationError("Cannot mix time-zone-aware and naive datetimes", field=field)


def validate_interval(start: datetime, end: datetime) -> TimeInterval:
    """Return the interval, rejecting zero or negative durations."""
    _ensure_comparable(start, end, "end_time")
    interval = TimeInterval(start, end)
    if interval.is_empty:
        raise ValidationError("Appointment end must be after its start", field="end_time")
    return interval


def conflicts(
    candidate: Candidate,
    existing: Iterable[Appointment],
    exclude_id: str | None = None,
) -> list[Appointment]:
    """Return the appointments that collide with ``candidate``.

    Only appointments on the same resource count; cancelled ones and the
    appointment identified by ``exclude_id`` are ignored.
    """
    window = candidate.interval
    return [
        appointment
        for appointment in existing
        if appointment.resource_id == candidate.resource_id
        and not appointment.is_cancelled
        and appointment.id != exclude_id
        and appointment.interval.overlaps(window)
    ]


def has_conflict(
    candidate: Candidate,
    existing: Iterable[Appointment],
    exclude_id: str | None = None,
) -> bool:
    return bool(conflicts(candidate, existing, exclude_id))


def day_window(day: date, zone: tzinfo | None) -> TimeInterval:
    start = datetime.combine(day, time.min, tzinfo=zone)
    return TimeInterval(start, datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone))


def _by_start(appointments: Iterable[Appointment]) -> list[Appointment]:
    return sorted(appointments, key=lambda appointment: appointment.start_time)


def for_date(day: date, appointments: Iterable[Appointment]) -> list[Appointment]:
    """Appointments starting on ``day`` in their own time zone."""
    return _by_start(
        appointment
        for appointment in appointments
        if day_window(day, appointment.start_time.tzinfo).contains(appointment.start_time)
    )


def days_with_appointments(
    range_start: date,
    range_end: date,
    appointments: Iterable[Appointment],
) -> list[date]:
    """Distinct calendar days in ``[range_start, range_end]`` with an appointment."""
    days = {appointment.start_time.date() for appointment in appointments}
    return sorted(day for day in days if range_start <= day <= range_end)


def in_range(start: datetime, end: datetime, appointments: Iterable[Appointment]) -> list[Appointment]:
    """Appointments whose start lies in ``[start, end]`` inclusive."""
    _ensure_comparable(start, end, "end")
    matches = []
    for appointment in appointments:
        _ensure_comparable(start, appointment.start_time, "start")
        if start <= appointment.start_time <= end:
            matches.append(appointment)
    return _by_start(matches)


@dataclass(frozen=True)
class AppointmentFilter:
    start_date: date | None = None
    end_date: date | None = None
    client: str | None = None
    vehicle: str | None = None
    service: str | None = None
    resource: str | None = None
    status: AppointmentStatus | None = None
    search_text: str | None = None


def _matches_text(value: str | None, needle: str) -> bool:
    return value is not None and needle in value.lower()


def filter_appointments(appointments: Iterable[Appointment], criteria: AppointmentFilter) -> list[Appointment]:
    """Apply every set criterion; unset criteria match everything."""
    results = []
    for appointment in appointments:
        day = appointment.start_time.date()
        if criteria.start_date and day < criteria.start_date:
            continue
        if criteria.end_date and day > criteria.end_date:
            continue
        if criteria.client and appointment.client_id != criteria.client:
            continue
        if criteria.vehicle and appointment.vehicle_id != criteria.vehicle:
            continue
        if criteria.service and appointment.service_type != criteria.service:
            continue
        if criteria.resource and appointment.resource_id != criteria.resource:
            continue
        if criteria.status and appointment.status is not criteria.status:
            continue
        if criteria.search_text:
            needle = criteria.search_text.lower()
            fields = (
                appointment.service_type,
                appointment.notes,
                appointment.resource_id,
                appointment.client_id,
                appointment.vehicle_id,
            )
            if not any(_matches_text(value, needle) for value in fields):
                continue
        results.append(appointment)
    return _by_start(results)
