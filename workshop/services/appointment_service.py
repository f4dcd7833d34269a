"""Appointment service - booking, rescheduling and day views."""

import logging
import uuid
from datetime import date, datetime
from typing import Any

from workshop.domain import (
    Appointment,
    AppointmentStatus,
    ConflictError,
    ErrorCode,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from workshop.domain import scheduling
from workshop.domain.records import parse_appointment_status
from workshop.domain.scheduling import AppointmentFilter, Candidate
from workshop.stores.interfaces import Clock, DataStore, EntityKind

logger = logging.getLogger(__name__)


def _booking_order(appointment: Appointment) -> tuple[datetime, str]:
    return appointment.created_at, appointment.id


class AppointmentService:
    """Service for appointment scheduling operations."""

    def __init__(self, store: DataStore, clock: Clock) -> None:
        self._store = store
        self._clock = clock

    def list_appointments(self) -> list[Appointment]:
        return scheduling.filter_appointments(self._store.get_all(EntityKind.APPOINTMENT), AppointmentFilter())

    def get_appointment(self, appointment_id: str) -> Appointment:
        """Return an appointment by ID.

        Raises:
            NotFoundError: If the appointment does not exist.
        """
        appointment = self._store.get_by_id(EntityKind.APPOINTMENT, appointment_id)
        if appointment is None:
            raise NotFoundError(ErrorCode.APPOINTMENT_NOT_FOUND, appointment_id)
        return appointment

    def _resource_appointments(self, resource_id: str) -> list[Appointment]:
        return self._store.query(
            EntityKind.APPOINTMENT,
            lambda appointment: appointment.resource_id == resource_id,
        )

    def _ensure_free(self, candidate: Candidate, exclude_id: str | None = None) -> None:
        clashes = scheduling.conflicts(candidate, self._resource_appointments(candidate.resource_id), exclude_id)
        if clashes:
            logger.warning(
                "Schedule conflict on %s for %s - %s with %s",
                candidate.resource_id,
                candidate.start.isoformat(),
                candidate.end.isoformat(),
                [clash.id for clash in clashes],
            )
            raise ConflictError.schedule(candidate.resource_id, [clash.id for clash in clashes])

    def book(
        self,
        resource_id: str,
        start: datetime,
        end: datetime,
        client_id: str | None = None,
        vehicle_id: str | None = None,
        service_type: str | None = None,
        notes: str | None = None,
    ) -> Appointment:
        """Book a new appointment in ``scheduled``.

        Raises:
            ValidationError: If the duration is zero or negative, or the
                resource is blank.
            ConflictError: If the resource is already booked in the range.
        """
        if not resource_id or not resource_id.strip():
            raise ValidationError("Resource is required", field="resourceId")
        scheduling.validate_interval(start, end)
        candidate = Candidate(resource_id=resource_id, start=start, end=end)
        self._ensure_free(candidate)

        now = self._clock.now()
        appointment = self._store.insert(
            EntityKind.APPOINTMENT,
            Appointment(
                id=str(uuid.uuid4()),
                resource_id=resource_id,
                start_time=start,
                end_time=end,
                status=AppointmentStatus.SCHEDULED,
                client_id=client_id,
                vehicle_id=vehicle_id,
                service_type=service_type,
                notes=notes,
                created_at=now,
                updated_at=now,
            ),
        )

        # Another booking may have been written between the check and the insert.
        # The earlier of two colliding bookings wins; ties go to the lower id.
        clashes = scheduling.conflicts(candidate, self._resource_appointments(resource_id), appointment.id)
        earlier = [clash for clash in clashes if _booking_order(clash) < _booking_order(appointment)]
        if earlier:
            self._store.delete(EntityKind.APPOINTMENT, appointment.id)
            logger.warning("Concurrent booking on %s, withdrew %s", resource_id, appointment.id)
            raise ConflictError.schedule(resource_id, [clash.id for clash in earlier])

        logger.info("Booked %s on %s from %s to %s", appointment.id, resource_id, start.isoformat(), end.isoformat())
        return appointment

    def reschedule(
        self,
        appointment: Appointment,
        start: datetime | None = None,
        end: datetime | None = None,
        resource_id: str | None = None,
        **details: Any,
    ) -> Appointment:
        """Move an appointment in time or to another resource.

        ``details`` may update the descriptive fields (client_id,
        vehicle_id, service_type, notes).
        """
        if appointment.is_cancelled:
            raise InvalidTransitionError(appointment.status.value, "rescheduled")
        unknown = set(details) - {"client_id", "vehicle_id", "service_type", "notes"}
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        start = start or appointment.start_time
        end = end or appointment.end_time
        resource_id = resource_id or appointment.resource_id
        scheduling.validate_interval(start, end)
        self._ensure_free(Candidate(resource_id=resource_id, start=start, end=end), exclude_id=appointment.id)

        changes: dict[str, Any] = {
            "start_time": start,
            "end_time": end,
            "resource_id": resource_id,
            "updated_at": self._clock.now(),
            **details,
        }
        updated = self._store.update(EntityKind.APPOINTMENT, appointment.id, changes, appointment.version)
        logger.info("Rescheduled %s on %s from %s to %s", updated.id, resource_id, start.isoformat(), end.isoformat())
        return updated

    def update_status(self, appointment: Appointment, status: AppointmentStatus | str) -> Appointment:
        """Set the appointment status.

        Cancellation is permanent: a cancelled appointment cannot take any
        other status.
        """
        target = parse_appointment_status(status)
        if appointment.is_cancelled or target is appointment.status:
            raise InvalidTransitionError(appointment.status.value, target.value)
        updated = self._store.update(
            EntityKind.APPOINTMENT,
            appointment.id,
            {"status": target, "updated_at": self._clock.now()},
            appointment.version,
        )
        logger.info("Appointment %s is now %s", updated.id, target.value)
        return updated

    def delete_appointment(self, appointment_id: str) -> None:
        """Remove an appointment.

        Raises:
            NotFoundError: If the appointment does not exist.
        """
        self._store.delete(EntityKind.APPOINTMENT, appointment_id)
        logger.info("Deleted appointment %s", appointment_id)

    def for_date(self, day: date) -> list[Appointment]:
        return scheduling.for_date(day, self._store.get_all(EntityKind.APPOINTMENT))

    def days_with_appointments(self, range_start: date, range_end: date) -> list[date]:
        if range_end < range_start:
            raise ValidationError("Range end must not precede its start", field="end")
        return scheduling.days_with_appointments(range_start, range_end, self._store.get_all(EntityKind.APPOINTMENT))

    def in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        return scheduling.in_range(start, end, self._store.get_all(EntityKind.APPOINTMENT))

    def filter(self, criteria: AppointmentFilter) -> list[Appointment]:
        return scheduling.filter_appointments(self._store.get_all(EntityKind.APPOINTMENT), criteria)

    def has_conflict(
        self,
        resource_id: str,
        start: datetime,
        end: datetime,
        exclude_id: str | None = None,
    ) -> bool:
        scheduling.validate_interval(start, end)
        candidate = Candidate(resource_id=resource_id, start=start, end=end)
        return scheduling.has_conflict(candidate, self._resource_appointments(resource_id), exclude_id)
