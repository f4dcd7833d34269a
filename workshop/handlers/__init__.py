from workshop.handlers.views import (
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

__all__ = [
    "AppointmentDaysView",
    "AppointmentDayView",
    "AppointmentDetailView",
    "AppointmentListView",
    "AppointmentStatusView",
    "OrderDetailView",
    "OrderListView",
    "OrderPricingView",
    "OrderTimelineView",
    "OrderTransitionView",
]
