from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class CoreBackendConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core_backend"

    def ready(self):
        """Fail fast when the configured event publisher cannot be imported."""
        from notifications.publishers import get_event_publisher

        publisher = get_event_publisher()
        logger.debug(f"Event publisher: {publisher.__class__.__name__}")
