"""Django signals: order events and cache invalidation.

Order events are sent by OrderLifecycleManager after the write succeeds:

- ``order_created(order)``
- ``order_updated(order)`` for pricing and line-item changes
- ``order_status_changed(order, old_status, new_status)``
"""

from django.db.models.signals import post_delete, post_save
from django.dispatch import Signal, receiver

from workshop.cache import invalidate_appointment_views
from workshop.models import Appointment

order_created = Signal()
order_updated = Signal()
order_status_changed = Signal()


@receiver([post_save, post_delete], sender=Appointment)
def invalidate_appointment_cache(sender, instance, **kwargs):
    """Invalidate day views when an appointment is saved or deleted."""
    invalidate_appointment_views()
