"""Cache keys for appointment day views.

Keys embed a generation number; bumping the generation invalidates every
cached day view at once.
"""

from datetime import date

from django.conf import settings
from django.core.cache import cache

GENERATION_KEY = "appointments:generation"


def _generation() -> int:
    return cache.get_or_set(GENERATION_KEY, 1, timeout=None)


def day_key(day: date) -> str:
    return f"appointments:v{_generation()}:day:{day.isoformat()}"


def days_key(start: date, end: date) -> str:
    return f"appointments:v{_generation()}:days:{start.isoformat()}:{end.isoformat()}"


def timeout() -> int:
    return settings.WORKSHOP_DAY_VIEW_CACHE_SECONDS


def invalidate_appointment_views() -> None:
    try:
        cache.incr(GENERATION_KEY)
    except ValueError:
        cache.set(GENERATION_KEY, 2, timeout=None)
