"""
Latest GPS fix per driver.

Fixes are kept in the "driver_locations" cache alias, which is bounded
(MAX_ENTRIES) and expires entries after DRIVER_LOCATION_TTL seconds. Nothing
here touches the database.
"""
import logging
import time

from django.conf import settings
from django.core.cache import caches

from core_backend.exceptions import ValidationError

logger = logging.getLogger(__name__)

CACHE_ALIAS = "driver_locations"


def _coordinate(value, name, limit):
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if not -limit <= number <= limit:
        raise ValidationError(f"{name} must be between {-limit} and {limit}")
    return number


class DriverLocationCache:
    def __init__(self, alias=CACHE_ALIAS, ttl=None):
        self.cache = caches[alias]
        self.ttl = ttl if ttl is not None else settings.DRIVER_LOCATION_TTL

    @staticmethod
    def _key(driver_id):
        return f"driver:{int(driver_id)}:location"

    def update(self, driver_id, lat, lng):
        if driver_id in (None, ""):
            raise ValidationError("driver_id is required")
        fix = {
            "driver_id": int(driver_id),
            "lat": _coordinate(lat, "lat", 90),
            "lng": _coordinate(lng, "lng", 180),
            "timestamp": int(time.time() * 1000),
        }
        self.cache.set(self._key(driver_id), fix, timeout=self.ttl)
        logger.debug(f"Driver {driver_id} at {fix['lat']},{fix['lng']}")
        return fix

    def get(self, driver_id):
        """The last fix of a driver, or None once it has expired."""
        return self.cache.get(self._key(driver_id))

    def forget(self, driver_id):
        self.cache.delete(self._key(driver_id))
