"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging
from dataclasses import replace
from datetime import date

from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from workshop import cache as view_cache
from workshop.domain import DomainError, ErrorCode, ValidationError
from workshop.domain.records import appointment_to_record
from workshop.handlers.serializers import (
    AppointmentCreateSerializer,
    AppointmentFilterSerializer,
    AppointmentSerializer,
    AppointmentStatusSerializer,
    AppointmentUpdateSerializer,
    DayRangeSerializer,
    OrderCreateSerializer,
    OrderPricingSerializer,
    OrderSerializer,
    StatusHistoryEntrySerializer,
    TransitionSerializer,
)
from workshop.services import AppointmentService, OrderLifecycleManager
from workshop.stores.django_store import DjangoDataStore
from workshop.stores.interfaces import SystemClock

logger = logging.getLogger(__name__)

_HTTP_STATUS = {
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.SCHEDULE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.VERSION_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.APPOINTMENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def order_manager() -> OrderLifecycleManager:
    return OrderLifecycleManager(DjangoDataStore(), SystemClock())


def appointment_service() -> AppointmentService:
    return AppointmentService(DjangoDataStore(), SystemClock())


def domain_error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "detail": error.message},
        status=_HTTP_STATUS[error.code],
    )


class DomainAPIView(APIView):
    """APIView that renders domain errors with their mapped status code."""

    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            logger.info("%s %s rejected: %s", self.request.method, self.request.path, exc)
            return domain_error_response(exc)
        return super().handle_exception(exc)


class OrderListView(DomainAPIView):
    """Handler for GET/POST /api/orders"""

    def get(self, request: Request) -> Response:
        return Response(OrderSerializer(order_manager().list_orders(), many=True).data)

    def post(self, request: Request) -> Response:
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = order_manager().open_order(
            technician=serializer.validated_data.get("technician"),
            **serializer.pricing_kwargs(),
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(DomainAPIView):
    """Handler for GET /api/orders/{order_id}"""

    def get(self, request: Request, order_id: str) -> Response:
        return Response(OrderSerializer(order_manager().get_order(order_id)).data)


class OrderPricingView(DomainAPIView):
    """Handler for PATCH /api/orders/{order_id}/pricing"""

    def patch(self, request: Request, order_id: str) -> Response:
        serializer = OrderPricingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        manager = order_manager()
        order = replace(manager.get_order(order_id), version=serializer.validated_data["version"])
        updated = manager.update_pricing(order, **serializer.pricing_kwargs())
        return Response(OrderSerializer(updated).data)


class OrderTransitionView(DomainAPIView):
    """Handler for POST /api/orders/{order_id}/transitions"""

    def post(self, request: Request, order_id: str) -> Response:
        serializer = TransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        manager = order_manager()
        order = replace(manager.get_order(order_id), version=data["version"])
        updated = manager.transition(order, data["status"], actor=data.get("user"), note=data.get("notes"))
        return Response(OrderSerializer(updated).data)


class OrderTimelineView(DomainAPIView):
    """Handler for GET /api/orders/{order_id}/timeline"""

    def get(self, request: Request, order_id: str) -> Response:
        manager = order_manager()
        order = manager.get_order(order_id)
        return Response(
            {
                "status": order.status.value,
                "timeline": StatusHistoryEntrySerializer(manager.timeline(order), many=True).data,
                "availableTransitions": [target.value for target in manager.available_transitions(order)],
            }
        )


class AppointmentListView(DomainAPIView):
    """Handler for GET/POST /api/appointments"""

    def get(self, request: Request) -> Response:
        serializer = AppointmentFilterSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        appointments = appointment_service().filter(serializer.to_filter())
        return Response(AppointmentSerializer(appointments, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = AppointmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        appointment = appointment_service().book(
            resource_id=data["resourceId"],
            start=data["start_time"],
            end=data["end_time"],
            client_id=data.get("client_id"),
            vehicle_id=data.get("vehicle_id"),
            service_type=data.get("service_type"),
            notes=data.get("notes"),
        )
        return Response(AppointmentSerializer(appointment).data, status=status.HTTP_201_CREATED)


class AppointmentDetailView(DomainAPIView):
    """Handler for GET/PATCH/DELETE /api/appointments/{appointment_id}"""

    def get(self, request: Request, appointment_id: str) -> Response:
        return Response(AppointmentSerializer(appointment_service().get_appointment(appointment_id)).data)

    def patch(self, request: Request, appointment_id: str) -> Response:
        serializer = AppointmentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        service = appointment_service()
        appointment = replace(service.get_appointment(appointment_id), version=data.pop("version"))
        updated = service.reschedule(
            appointment,
            start=data.pop("start_time", None),
            end=data.pop("end_time", None),
            resource_id=data.pop("resourceId", None),
            **data,
        )
        return Response(AppointmentSerializer(updated).data)

    def delete(self, request: Request, appointment_id: str) -> Response:
        appointment_service().delete_appointment(appointment_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AppointmentStatusView(DomainAPIView):
    """Handler for POST /api/appointments/{appointment_id}/status"""

    def post(self, request: Request, appointment_id: str) -> Response:
        serializer = AppointmentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = appointment_service()
        appointment = replace(
            service.get_appointment(appointment_id), version=serializer.validated_data["version"]
        )
        updated = service.update_status(appointment, serializer.validated_data["status"])
        return Response(AppointmentSerializer(updated).data)


class AppointmentDayView(DomainAPIView):
    """Handler for GET /api/appointments/day/{yyyy-mm-dd}"""

    def get(self, request: Request, day: str) -> Response:
        try:
            parsed = date.fromisoformat(day)
        except ValueError:
            raise ValidationError("Day must be formatted as YYYY-MM-DD", field="day") from None

        key = view_cache.day_key(parsed)
        data = cache.get(key)
        if data is None:
            data = [appointment_to_record(a) for a in appointment_service().for_date(parsed)]
            cache.set(key, data, view_cache.timeout())
        return Response(data)


class AppointmentDaysView(DomainAPIView):
    """Handler for GET /api/appointments/days?start=&end="""

    def get(self, request: Request) -> Response:
        serializer = DayRangeSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        start, end = serializer.validated_data["start"], serializer.validated_data["end"]

        key = view_cache.days_key(start, end)
        data = cache.get(key)
        if data is None:
            days = appointment_service().days_with_appointments(start, end)
            data = {"days": [day.isoformat() for day in days]}
            cache.set(key, data, view_cache.timeout())
        return Response(data)
