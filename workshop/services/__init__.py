from workshop.services.appointment_service import AppointmentService
from workshop.services.order_service import OrderLifecycleManager

__all__ = ["AppointmentService", "OrderLifecycleManager"]
