from typing import List, Optional
import logging

from django.db.models import F
from django.db.models.functions import Greatest
from django.utils import timezone

from core_backend.exceptions import NotFoundError, ValidationError
from core_backend.transactions import atomic_operation
from kds.models import KitchenCompileSettings, KitchenTimer
from notifications.publishers import KITCHEN_TIMERS_UPDATED, publish_on_commit

logger = logging.getLogger(__name__)

TIMER_FIELDS = ("id", "name", "seconds_left", "total_seconds", "running")


def _seconds(value, field_name) -> int:
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number of seconds, got {value!r}")
    if seconds < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return seconds


def _string_list(value, field_name) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (str, bytes, dict)) or not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field_name} must be a list")
    cleaned = []
    for entry in value:
        if not isinstance(entry, str) or not entry.strip():
            raise ValidationError(f"{field_name} entries must be non-empty strings")
        if entry.strip() not in cleaned:
            cleaned.append(entry.strip())
    return cleaned


def _id_list(value, field_name) -> List[int]:
    if value is None:
        return []
    if isinstance(value, (str, bytes, dict)) or not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field_name} must be a list")
    ids = []
    for entry in value:
        try:
            product_id = int(entry)
        except (TypeError, ValueError):
            raise ValidationError(f"{field_name} entries must be product ids, got {entry!r}")
        if product_id not in ids:
            ids.append(product_id)
    return ids


class KitchenTimerService:
    """
    Free-standing kitchen countdowns.

    Timers are saved whole by the kitchen screen; the periodic tick counts the
    running ones down and puts a finished timer back to its full length,
    paused. Every change is broadcast as kitchen_timers_updated with the full
    list so screens can redraw without another request.
    """

    @staticmethod
    def snapshot() -> List[dict]:
        return list(KitchenTimer.objects.order_by("created_at", "id").values(*TIMER_FIELDS))

    @staticmethod
    def _broadcast():
        publish_on_commit(KITCHEN_TIMERS_UPDATED, {"timers": KitchenTimerService.snapshot()})

    @staticmethod
    @atomic_operation
    def save_timer(name="", seconds_left=0, total_seconds=0, running=False, timer_id=None) -> KitchenTimer:
        """Create a timer, or overwrite every field of timer_id when given."""
        seconds_left = _seconds(seconds_left, "seconds_left")
        total_seconds = _seconds(total_seconds, "total_seconds")

        if timer_id is None:
            timer = KitchenTimer(name=name or "")
        else:
            timer = KitchenTimer.objects.select_for_update().filter(pk=timer_id).first()
            if timer is None:
                raise NotFoundError(f"Kitchen timer {timer_id} not found", timer_id=timer_id)
            timer.name = name or ""

        timer.seconds_left = seconds_left
        timer.total_seconds = total_seconds
        timer.running = bool(running)
        timer.save()

        KitchenTimerService._broadcast()
        return timer

    @staticmethod
    def list_timers():
        return KitchenTimer.objects.order_by("created_at", "id")

    @staticmethod
    @atomic_operation
    def delete_timer(timer_id) -> bool:
        """Delete a timer. Returns False when it was already gone."""
        deleted, _ = KitchenTimer.objects.filter(pk=timer_id).delete()
        if deleted:
            KitchenTimerService._broadcast()
        return bool(deleted)

    @staticmethod
    @atomic_operation
    def tick(seconds: int = 1) -> int:
        """
        Count running timers down by seconds. Timers reaching zero are reset
        to their total and paused. Returns the number of timers changed.
        """
        now = timezone.now()
        counted = KitchenTimer.objects.filter(running=True, seconds_left__gt=0).update(
            seconds_left=Greatest(F("seconds_left") - seconds, 0),
            updated_at=now,
        )
        finished = KitchenTimer.objects.filter(running=True, seconds_left=0).update(
            seconds_left=F("total_seconds"),
            running=False,
            updated_at=now,
        )
        if finished:
            logger.info(f"{finished} kitchen timers finished")
        if counted or finished:
            KitchenTimerService._broadcast()
        return counted + finished


class KitchenCompileSettingsService:

    @staticmethod
    def get_settings() -> KitchenCompileSettings:
        return KitchenCompileSettings.load()

    @staticmethod
    @atomic_operation
    def update_settings(
        excluded_ingredients: Optional[list] = None,
        excluded_categories: Optional[list] = None,
        excluded_items: Optional[list] = None,
    ) -> KitchenCompileSettings:
        """Replace all three exclusion lists. A list left out is cleared."""
        settings = KitchenCompileSettings.load()
        settings.excluded_ingredients = _string_list(excluded_ingredients, "excluded_ingredients")
        settings.excluded_categories = _string_list(excluded_categories, "excluded_categories")
        settings.excluded_items = _id_list(excluded_items, "excluded_items")
        settings.save()

        logger.info(
            f"Kitchen exclusions: {len(settings.excluded_categories)} categories, "
            f"{len(settings.excluded_items)} items, {len(settings.excluded_ingredients)} ingredients"
        )
        return settings
