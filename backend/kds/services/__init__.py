from .scheduler import KitchenScheduler
from .timers import KitchenCompileSettingsService, KitchenTimerService
from .timing import KitchenTimingConfig, PrepLine, estimate_prep_seconds

__all__ = [
    'KitchenScheduler',
    'KitchenCompileSettingsService',
    'KitchenTimerService',
    'KitchenTimingConfig',
    'PrepLine',
    'estimate_prep_seconds',
]
