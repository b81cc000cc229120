from collections.abc import Iterable
from datetime import timedelta
from typing import List
import logging

from django.utils import timezone

from core_backend.exceptions import ConflictError, OrderItemNotFoundError, StateError, ValidationError
from core_backend.transactions import atomic_operation
from notifications.publishers import (
    ORDER_DELIVERED,
    ORDER_READY,
    ORDERS_UPDATED,
    publish_on_commit,
)
from kds.models import KitchenCompileSettings
from orders.models import Order, OrderItem
from orders.values import KITCHEN_STATUSES
from .timing import KitchenTimingConfig, PrepLine, estimate_prep_seconds

logger = logging.getLogger(__name__)

LOCK_ATTEMPTS = 3


def _normalize_ids(item_ids) -> List[int]:
    if isinstance(item_ids, (str, bytes)) or not isinstance(item_ids, Iterable):
        raise ValidationError("ids must be a list")
    ids = []
    for raw in item_ids:
        try:
            item_id = int(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid item id {raw!r}")
        if item_id not in ids:
            ids.append(item_id)
    if not ids:
        raise ValidationError("Missing ids")
    return ids


class KitchenScheduler:
    """
    Moves order items through new -> preparing -> ready -> delivered and keeps
    the owning orders' kitchen timestamps in step.
    """

    @staticmethod
    def _load_items(item_ids) -> List[OrderItem]:
        """
        Lock the owning orders, then the items.

        Every writer locks an order before its items, so a kitchen batch and
        a cashier working on the same order wait for each other in turn.
        """
        ids = _normalize_ids(item_ids)
        for _ in range(LOCK_ATTEMPTS):
            order_ids = set(OrderItem.objects.filter(pk__in=ids).values_list("order_id", flat=True))
            list(Order.objects.select_for_update().filter(pk__in=order_ids).order_by("id"))
            items = list(OrderItem.objects.select_for_update().filter(pk__in=ids).order_by("id"))
            # A merge may have re-parented a line before its order was locked.
            if {item.order_id for item in items} <= order_ids:
                break
        else:
            raise ConflictError("Order items moved while being updated, try again")

        found = {item.id for item in items}
        missing = [item_id for item_id in ids if item_id not in found]
        if missing:
            raise OrderItemNotFoundError(missing)
        return items

    @staticmethod
    def _refresh_orders(order_ids, orders_in_call: int) -> List[int]:
        """
        Recompute prep_started_at / estimated_ready_at / kitchen_delivered_at
        for the given orders. Returns the ids of the orders now fully delivered.
        """
        now = timezone.now()
        config = KitchenTimingConfig.from_settings()
        delivered = []

        for order in Order.objects.select_for_update().filter(pk__in=order_ids).order_by("id"):
            items = list(order.items.select_related("product"))
            statuses = {item.kitchen_status for item in items}

            if OrderItem.KitchenStatus.PREPARING in statuses:
                lines = [
                    PrepLine(item.product_id, item.product.prep_minutes, item.quantity)
                    for item in items
                    if item.product_id is not None
                ]
                seconds = estimate_prep_seconds(lines, orders_in_call, config)
                order.estimated_ready_at = now + timedelta(seconds=seconds)
                if order.prep_started_at is None:
                    order.prep_started_at = now
                logger.debug(f"Order {order.id} estimated ready in {seconds}s")
            else:
                order.estimated_ready_at = None

            if items and statuses == {OrderItem.KitchenStatus.DELIVERED}:
                order.kitchen_delivered_at = now
                delivered.append(order.id)

            order.save(update_fields=["prep_started_at", "estimated_ready_at", "kitchen_delivered_at", "updated_at"])

        return delivered

    @staticmethod
    @atomic_operation
    def set_kitchen_status(item_ids, status) -> int:
        """
        Advance a batch of items to status. Returns the number of items changed.

        Items already at or past status are left as they are, so a stale
        terminal can never move an item backwards. One unknown id aborts the
        whole batch.
        """
        if status not in KITCHEN_STATUSES:
            raise ValidationError(f"Invalid kitchen status {status!r}")

        items = KitchenScheduler._load_items(item_ids)
        unconfirmed = [item.id for item in items if not item.confirmed]
        if unconfirmed:
            raise StateError(
                f"Items not confirmed for the kitchen: {', '.join(str(i) for i in unconfirmed)}",
                item_ids=unconfirmed,
            )

        target = KITCHEN_STATUSES.index(status)
        advancing = [item.id for item in items if item.kitchen_rank < target]
        changed = OrderItem.objects.filter(pk__in=advancing).update(kitchen_status=status) if advancing else 0

        order_ids = sorted({item.order_id for item in items})
        delivered = KitchenScheduler._refresh_orders(order_ids, orders_in_call=len(order_ids))

        logger.info(f"Kitchen: {changed}/{len(items)} items -> {status} across orders {order_ids}")
        publish_on_commit(ORDERS_UPDATED)
        if status == OrderItem.KitchenStatus.READY:
            publish_on_commit(ORDER_READY, {"orderIds": order_ids})
        if status == OrderItem.KitchenStatus.DELIVERED and delivered:
            publish_on_commit(ORDER_DELIVERED, {"orderIds": delivered})
        return changed

    @staticmethod
    @atomic_operation
    def reset_items(item_ids) -> int:
        """Administrative reset: put items back to "new" and recompute their orders."""
        items = KitchenScheduler._load_items(item_ids)
        changed = (
            OrderItem.objects.filter(pk__in=[item.id for item in items])
            .exclude(kitchen_status=OrderItem.KitchenStatus.NEW)
            .update(kitchen_status=OrderItem.KitchenStatus.NEW)
        )
        order_ids = sorted({item.order_id for item in items})
        Order.objects.filter(pk__in=order_ids).update(kitchen_delivered_at=None)
        KitchenScheduler._refresh_orders(order_ids, orders_in_call=1)

        logger.warning(f"Kitchen reset: {changed} items back to new across orders {order_ids}")
        publish_on_commit(ORDERS_UPDATED)
        return changed

    @staticmethod
    def kitchen_queue():
        """
        Lines the kitchen still has to work on, oldest order first. Products in
        an excluded category, or excluded by id, never reach the screen.
        """
        exclusions = KitchenCompileSettings.load()
        queue = (
            OrderItem.objects.filter(
                confirmed=True,
                kitchen_status__in=[
                    OrderItem.KitchenStatus.NEW,
                    OrderItem.KitchenStatus.PREPARING,
                    OrderItem.KitchenStatus.READY,
                ],
                order__status__in=[
                    Order.OrderStatus.OCCUPIED,
                    Order.OrderStatus.CONFIRMED,
                    Order.OrderStatus.PAID,
                ],
            )
            .select_related("order", "product")
            .order_by("order__created_at", "order_id", "id")
        )
        if exclusions.excluded_categories:
            queue = queue.exclude(product__category__in=exclusions.excluded_categories)
        if exclusions.excluded_items:
            queue = queue.exclude(product_id__in=exclusions.excluded_items)
        return queue

    @staticmethod
    def preparing_item_ids() -> List[int]:
        return list(
            OrderItem.objects.filter(kitchen_status=OrderItem.KitchenStatus.PREPARING)
            .order_by("id")
            .values_list("id", flat=True)
        )
