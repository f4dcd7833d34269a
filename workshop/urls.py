from django.urls import path

from workshop.handlers import (
    AppointmentDaysView,
    AppointmentDayView,
    AppointmentDetailView,
    AppointmentListView,
    AppointmentStatusView,
    OrderDetailView,
    OrderListView,
    OrderPricingView,
    OrderTimelineView,
    OrderTransitionView,
)

urlpatterns = [
    path("orders", OrderListView.as_view(), name="order-list"),
    path("orders/<str:order_id>", OrderDetailView.as_view(), name="order-detail"),
    path("orders/<str:order_id>/pricing", OrderPricingView.as_view(), name="order-pricing"),
    path("orders/<str:order_id>/transitions", OrderTransitionView.as_view(), name="order-transitions"),
    path("orders/<str:order_id>/timeline", OrderTimelineView.as_view(), name="order-timeline"),
    path("appointments", AppointmentListView.as_view(), name="appointment-list"),
    path("appointments/days", AppointmentDaysView.as_view(), name="appointment-days"),
    path("appointments/day/<str:day>", AppointmentDayView.as_view(), name="appointment-day"),
    path(
        "appointments/<str:appointment_id>",
        AppointmentDetailView.as_view(),
        name="appointment-detail",
    ),
    path(
        "appointments/<str:appointment_id>/status",
        AppointmentStatusView.as_view(),
        name="appointment-status",
    ),
]
