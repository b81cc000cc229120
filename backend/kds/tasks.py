from celery import shared_task
import logging

from .services import KitchenTimerService

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def tick_kitchen_timers(seconds=1):
    """Periodic countdown of running kitchen timers, scheduled by celery beat."""
    changed = KitchenTimerService.tick(seconds)
    if changed:
        logger.debug(f"Kitchen timer tick changed {changed} timers")
    return changed
