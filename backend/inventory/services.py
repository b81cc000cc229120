from decimal import Decimal
from typing import List
import logging

from django.db import transaction
from django.utils import timezone

from core_backend.transactions import atomic_operation
from notifications.publishers import STOCK_LOW, STOCK_UPDATED, publish_on_commit
from .models import StockItem

logger = logging.getLogger(__name__)


class InventoryService:

    @staticmethod
    def find_stock(name: str, unit: str):
        """Locked lookup of the stock row an ingredient line draws from."""
        return (
            StockItem.objects.select_for_update()
            .filter(name__iexact=name, unit=unit)
            .order_by("id")
            .first()
        )

    @staticmethod
    def decrement_stock(stock: StockItem, quantity: Decimal) -> StockItem:
        """
        Subtract quantity from a locked stock row and raise the stock events.

        Stock may go negative: the sale already happened, the shelf count is
        corrected later.
        """
        stock.quantity -= quantity
        update_fields = ["quantity", "updated_at"]

        if stock.critical_quantity is not None and stock.quantity > stock.critical_quantity and stock.auto_added_to_cart:
            stock.auto_added_to_cart = False
            update_fields.append("auto_added_to_cart")

        stock.save(update_fields=update_fields)

        publish_on_commit(STOCK_UPDATED, {"stockId": stock.id})
        if stock.is_low:
            logger.warning(f"Stock low: {stock.name} ({stock.quantity} {stock.unit})")
            publish_on_commit(
                STOCK_LOW,
                {
                    "stockId": stock.id,
                    "name": stock.name,
                    "quantity": str(stock.quantity),
                    "unit": stock.unit,
                },
            )
        return stock

    @staticmethod
    @atomic_operation
    def deduct_for_order(order_id) -> List[StockItem]:
        """
        Deduct the ingredients of every line of an order from stock.

        Runs at most once per order: the first caller stamps
        Order.stock_deducted_at with a conditional update, later callers find
        it set and return an empty list. Ingredients with no matching stock row
        are logged and skipped.
        """
        from orders.models import Order, OrderItem

        claimed = Order.objects.filter(id=order_id, stock_deducted_at__isnull=True).update(
            stock_deducted_at=timezone.now()
        )
        if not claimed:
            logger.info(f"Stock already deducted for order {order_id} (or order missing), skipping")
            return []

        touched = {}
        for item in OrderItem.objects.filter(order_id=order_id).order_by("id"):
            for line in item.ingredient_lines:
                used = line.quantity * item.quantity
                stock = InventoryService.find_stock(line.name, line.unit)
                if stock is None:
                    logger.warning(f"No matching stock found for ingredient {line.name} ({line.unit})")
                    continue
                touched[stock.id] = InventoryService.decrement_stock(stock, used)

        logger.info(f"Deducted stock for order {order_id}: {len(touched)} stock items updated")
        return list(touched.values())

    @staticmethod
    def schedule_deduction(order_id):
        """Queue the deduction task once the current transaction commits."""
        from .tasks import deduct_order_stock

        transaction.on_commit(lambda: deduct_order_stock.delay(order_id))
