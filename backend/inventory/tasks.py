from celery import shared_task
import logging

from core_backend.exceptions import StoreError
from .services import InventoryService

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def deduct_order_stock(self, order_id):
    """
    Async task to deduct ingredient stock for a paid or closed order.

    Triggered on commit so the payment transaction is never blocked by
    inventory work. Safe to run twice: the deduction itself is idempotent.

    Args:
        order_id: ID of the order to process

    Returns:
        dict: Status and details of inventory processing
    """
    try:
        logger.info(f"Processing inventory for order {order_id}")
        touched = InventoryService.deduct_for_order(order_id)
        return {
            "status": "completed",
            "order_id": order_id,
            "stock_item_ids": [stock.id for stock in touched],
        }
    except StoreError as exc:
        logger.error(f"Error processing inventory for order {order_id}: {exc}")
        # Retry on failure
        raise self.retry(exc=exc)
