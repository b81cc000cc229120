from datetime import date
from decimal import Decimal
from typing import Any, Dict
import logging

from django.utils import timezone

from core_backend.exceptions import AlreadyClaimedError, OrderNotFoundError, StateError, ValidationError
from core_backend.transactions import atomic_operation, store_errors
from notifications.publishers import ORDERS_UPDATED, publish_on_commit
from orders.models import Order
from payments.money import ZERO, to_money

logger = logging.getLogger(__name__)


def _seconds_between(start, end):
    if start is None or end is None:
        return None
    return (end - start).total_seconds()


class DriverDispatchService:
    """
    Delivery drivers: claiming orders, reporting progress and the daily report.
    """

    @staticmethod
    def claim(order_id, driver_id) -> Order:
        """
        Assign a driver to an order.

        A single conditional UPDATE on driver_id IS NULL: of any number of
        concurrent claims exactly one matches a row, the others get
        AlreadyClaimedError.
        """
        if driver_id in (None, ""):
            raise ValidationError("Missing driver_id")

        with store_errors("claim order"):
            claimed = Order.objects.filter(pk=order_id, driver_id__isnull=True).update(
                driver_id=driver_id,
                driver_status=Order.DriverStatus.ASSIGNED,
                updated_at=timezone.now(),
            )
            if not claimed:
                if not Order.objects.filter(pk=order_id).exists():
                    raise OrderNotFoundError(order_id)
                logger.info(f"Order {order_id} already claimed, driver {driver_id} refused")
                raise AlreadyClaimedError(order_id)
            order = Order.objects.get(pk=order_id)

        logger.info(f"Order {order_id} claimed by driver {driver_id}")
        publish_on_commit(ORDERS_UPDATED)
        return order

    @staticmethod
    @atomic_operation
    def update_driver_status(order_id, driver_status) -> Order:
        if driver_status not in Order.DriverStatus.values:
            raise ValidationError(f"Invalid driver status {driver_status!r}")

        order = Order.objects.locked(order_id)
        if order.driver_id is None:
            raise StateError("Cannot change driver status: no driver assigned")

        now = timezone.now()
        order.driver_status = driver_status
        if driver_status == Order.DriverStatus.PICKED_UP:
            order.picked_up_at = now
        elif driver_status == Order.DriverStatus.DELIVERED and order.delivered_at is None:
            order.delivered_at = now
        order.save(update_fields=["driver_status", "picked_up_at", "delivered_at", "updated_at"])

        logger.info(f"Order {order.id} driver status -> {driver_status}")
        publish_on_commit(ORDERS_UPDATED)
        return order

    @staticmethod
    def driver_report(driver_id, day: date) -> Dict[str, Any]:
        """
        Closed orders a driver delivered on a given (local) day.

        Sales are summed from the lines of each order and grouped by the
        order's payment method. Durations are in seconds and None when a
        timestamp is missing.
        """
        orders = (
            Order.objects.filter(
                driver_id=driver_id,
                driver_status=Order.DriverStatus.DELIVERED,
                status=Order.OrderStatus.CLOSED,
                delivered_at__date=day,
            )
            .prefetch_related("items")
            .order_by("delivered_at", "id")
        )

        total_sales = ZERO
        sales_by_method: Dict[str, Decimal] = {}
        details = []
        for order in orders:
            order_total = to_money(sum((item.line_total for item in order.items.all()), ZERO))
            total_sales += order_total
            if order.payment_method:
                sales_by_method[order.payment_method] = sales_by_method.get(order.payment_method, ZERO) + order_total
            details.append(
                {
                    "id": order.id,
                    "payment_method": order.payment_method,
                    "customer_name": order.customer_name,
                    "customer_address": order.customer_address,
                    "created_at": order.created_at,
                    "picked_up_at": order.picked_up_at,
                    "delivered_at": order.delivered_at,
                    "total": order_total,
                    "delivery_time_seconds": _seconds_between(order.picked_up_at, order.delivered_at),
                    "kitchen_to_delivery_seconds": _seconds_between(
                        order.kitchen_delivered_at, order.delivered_at
                    ),
                }
            )

        return {
            "driver_id": int(driver_id),
            "date": day,
            "packets_delivered": len(details),
            "total_sales": total_sales,
            "sales_by_method": sales_by_method,
            "orders": details,
        }
